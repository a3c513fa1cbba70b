"""Read-side helpers for presenting drama to players."""

from .feed import FEED_TABS, articles_for_event, filter_feed, latest_first

__all__ = ["FEED_TABS", "articles_for_event", "filter_feed", "latest_first"]
