"""Feed ingestion module for RSS parsing and file downloading."""

from feedgrab.ingestion.downloader import DownloadOutcome, FailureReason, FileDownloader
from feedgrab.ingestion.rss_parser import FeedItem, RSSParser

__all__ = ["RSSParser", "FeedItem", "FileDownloader", "DownloadOutcome", "FailureReason"]
