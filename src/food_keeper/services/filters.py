"""Search and tab filtering of the food item list.

Everything here is a pure function of the collection, the search term,
the active tab and the current time.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from food_keeper.domain.food_items import FilterTab, FoodItem

RECENT_WINDOW = timedelta(days=7)


@dataclass(frozen=True)
class TabCounts:
    """Item counts per tab over the whole collection."""

    all: int
    recent: int
    consumed: int
    with_calories: int


@dataclass(frozen=True)
class FilteredView:
    """Items visible under the current search and tab, with aggregates."""

    items: list[FoodItem]
    total_calories: int
    counts: TabCounts
    search_term: str
    active_tab: FilterTab


def filter_food_items(
    items: Sequence[FoodItem],
    search_term: str,
    active_tab: FilterTab,
    now: datetime | None = None,
    recent_window: timedelta = RECENT_WINDOW,
) -> FilteredView:
    """Apply the search term, then the tab, and compute aggregates."""
    resolved_now = now or datetime.now(tz=UTC)
    visible = list(items)
    if search_term:
        visible = [item for item in visible if matches_search(item, search_term)]
    visible = [
        item
        for item in visible
        if matches_tab(item, active_tab, resolved_now, recent_window)
    ]
    return FilteredView(
        items=visible,
        total_calories=sum(item.calorie or 0 for item in visible),
        counts=count_tabs(items, resolved_now, recent_window),
        search_term=search_term,
        active_tab=active_tab,
    )


def matches_search(item: FoodItem, search_term: str) -> bool:
    """Case-insensitive substring match on name or description."""
    needle = search_term.lower()
    if needle in item.name.lower():
        return True
    return bool(item.description) and needle in item.description.lower()


def matches_tab(
    item: FoodItem,
    tab: FilterTab,
    now: datetime,
    recent_window: timedelta = RECENT_WINDOW,
) -> bool:
    """Return true when the item belongs to the tab."""
    if tab == FilterTab.RECENT:
        return item.created_at is not None and now - item.created_at <= recent_window
    if tab == FilterTab.CONSUMED:
        return item.consumed_date is not None
    if tab == FilterTab.WITH_CALORIES:
        return item.calorie is not None and item.calorie > 0
    return True


def count_tabs(
    items: Sequence[FoodItem],
    now: datetime,
    recent_window: timedelta = RECENT_WINDOW,
) -> TabCounts:
    """Count items per tab, ignoring any search term."""
    return TabCounts(
        all=len(items),
        recent=sum(
            1 for item in items if matches_tab(item, FilterTab.RECENT, now, recent_window)
        ),
        consumed=sum(
            1 for item in items if matches_tab(item, FilterTab.CONSUMED, now)
        ),
        with_calories=sum(
            1 for item in items if matches_tab(item, FilterTab.WITH_CALORIES, now)
        ),
    )
