"""Download notifications."""

from feedgrab.notifications.discord import DiscordEmbed, DiscordNotifier, DiscordWebhook

__all__ = ["DiscordNotifier", "DiscordWebhook", "DiscordEmbed"]
