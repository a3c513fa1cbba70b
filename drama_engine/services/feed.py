"""Drama feed filtering helpers."""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from ..catalog import DramaCatalog, get_catalog
from ..models import GeneratedMediaArticle, SocialDramaEvent

FEED_TABS: Tuple[str, ...] = ("all", "romance", "scandal", "rivalry", "family")


def filter_feed(
    events: Iterable[SocialDramaEvent],
    tab: str = "all",
    catalog: Optional[DramaCatalog] = None,
) -> List[SocialDramaEvent]:
    """Events belonging to a feed tab, in their original order."""

    if tab not in FEED_TABS:
        raise ValueError(f"Unknown feed tab: {tab}")
    if tab == "all":
        return list(events)
    categories = set((catalog or get_catalog()).feed_filters.get(tab, ()))
    return [event for event in events if event.category in categories]


def articles_for_event(
    articles: Iterable[GeneratedMediaArticle], event_id: str
) -> List[GeneratedMediaArticle]:
    return [article for article in articles if article.drama_event_id == event_id]


def latest_first(events: Iterable[SocialDramaEvent]) -> List[SocialDramaEvent]:
    return sorted(events, key=lambda event: event.created_at, reverse=True)


__all__ = ["FEED_TABS", "articles_for_event", "filter_feed", "latest_first"]
