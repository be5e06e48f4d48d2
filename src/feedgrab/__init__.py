"""feedgrab - RSS feed file grabber.

Polls an RSS feed, downloads every linked file to a local directory
and optionally announces each download on a Discord webhook.
"""

__version__ = "0.1.0"
