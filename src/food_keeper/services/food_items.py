"""In-memory collection of the user's food items."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta

import httpx

from food_keeper.adapters.food_keeper_client import FoodItemsClient
from food_keeper.domain.food_items import FilterTab, FoodItem, parse_food_item
from food_keeper.services.filters import RECENT_WINDOW, FilteredView, filter_food_items

logger = logging.getLogger(__name__)

UNAUTHORIZED_MESSAGE = "Please log in to view your food items."
FORBIDDEN_MESSAGE = "You do not have permission to view food items."
LOAD_FAILED_MESSAGE = (
    "Failed to load food items. Please make sure you are logged in "
    "and the backend server is running."
)


@dataclass
class FoodItemCollection:
    """Authoritative list of food items plus the current filter inputs.

    Each ``load`` takes a new generation number; a response that arrives
    after a newer load started, or after ``close``, is dropped.
    """

    client: FoodItemsClient
    recent_window: timedelta = RECENT_WINDOW
    items: list[FoodItem] = field(default_factory=list)
    search_term: str = ""
    active_tab: FilterTab = FilterTab.ALL
    loading: bool = False
    loaded: bool = False
    error: str | None = None
    _generation: int = 0

    async def load(self) -> bool:
        """Replace the collection with the server's list.

        Returns false when the load failed or its result went stale.
        """
        self._generation += 1
        generation = self._generation
        self.loading = True
        self.error = None
        try:
            payload = await self.client.list_food_items()
            items = [parse_food_item(row) for row in payload]
        except httpx.HTTPStatusError as exc:
            if generation == self._generation:
                self.error = _load_error_message(exc.response.status_code)
            logger.warning(
                "Failed to load food items",
                extra={"status_code": exc.response.status_code},
            )
            return False
        except (httpx.RequestError, KeyError, TypeError, ValueError):
            if generation == self._generation:
                self.error = LOAD_FAILED_MESSAGE
            logger.exception("Failed to load food items")
            return False
        finally:
            if generation == self._generation:
                self.loading = False
        if generation != self._generation:
            logger.info("Dropping stale food item list")
            return False
        self.items = items
        self.loaded = True
        return True

    def close(self) -> None:
        """Detach from in-flight loads; their results will be ignored."""
        self._generation += 1
        self.loading = False

    def reset(self) -> None:
        """Forget everything loaded for the previous session."""
        self.close()
        self.items = []
        self.loaded = False
        self.error = None
        self.search_term = ""
        self.active_tab = FilterTab.ALL

    def set_search_term(self, search_term: str) -> FilteredView:
        """Change the search term and return the recomputed view."""
        self.search_term = search_term
        return self.view()

    def set_tab(self, tab: FilterTab | str) -> FilteredView:
        """Change the active tab and return the recomputed view."""
        self.active_tab = FilterTab(tab)
        return self.view()

    def view(self, now: datetime | None = None) -> FilteredView:
        """Filtered view for the current inputs, evaluated at ``now``."""
        return filter_food_items(
            self.items,
            self.search_term,
            self.active_tab,
            now=now,
            recent_window=self.recent_window,
        )

    def find(self, item_id: int | str) -> FoodItem | None:
        """Return the item with the given id, if loaded."""
        for item in self.items:
            if str(item.id) == str(item_id):
                return item
        return None

    def append(self, item: FoodItem) -> None:
        """Add a newly created item."""
        self.items = [*self.items, item]

    def replace(self, item: FoodItem) -> None:
        """Swap the stored item that has the same id."""
        self.items = [
            item if str(existing.id) == str(item.id) else existing
            for existing in self.items
        ]

    def remove(self, item_id: int | str) -> None:
        """Drop the item with the given id."""
        self.items = [item for item in self.items if str(item.id) != str(item_id)]


def _load_error_message(status_code: int) -> str:
    if status_code == httpx.codes.UNAUTHORIZED:
        return UNAUTHORIZED_MESSAGE
    if status_code == httpx.codes.FORBIDDEN:
        return FORBIDDEN_MESSAGE
    return LOAD_FAILED_MESSAGE
