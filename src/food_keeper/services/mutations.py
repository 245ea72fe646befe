"""Add, edit and delete flows for food items."""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

import httpx
from pydantic import ValidationError

from food_keeper.adapters.food_keeper_client import FoodItemsClient
from food_keeper.domain.food_items import FoodItem, FoodItemDraft, parse_food_item
from food_keeper.errors import first_error_message
from food_keeper.services.banners import BannerBoard
from food_keeper.services.food_items import FoodItemCollection

logger = logging.getLogger(__name__)

DELETE_PROMPT = "Are you sure you want to delete this food item?"
NAME_REQUIRED = "Food name is required"
ADD_FAILED = "Failed to add food item. Please try again."
UPDATE_FAILED = "Failed to update food item. Please try again."
DELETE_FAILED = "Failed to delete food item. Please try again."
ADDED = "Food item added successfully!"
UPDATED = "Food item updated successfully!"
DELETED = "Food item deleted successfully!"


@dataclass
class EditForm:
    """Edit surface for one item, pre-filled from it."""

    item_id: int | str
    values: dict[str, object] = field(default_factory=dict)
    is_open: bool = True
    error: str | None = None


@dataclass
class FoodItemMutations:
    """Mutations against the Food Service that keep the collection in sync.

    Concurrent edits of the same item are not coordinated; the last
    response to arrive wins.
    """

    client: FoodItemsClient
    collection: FoodItemCollection
    banners: BannerBoard

    async def add(self, values: Mapping[str, object]) -> FoodItem | None:
        """Validate and create an item; returns it on success."""
        self.banners.clear()
        try:
            draft = FoodItemDraft.model_validate(dict(values))
        except ValidationError as exc:
            self.banners.error(first_error_message(exc))
            return None
        try:
            payload = await self.client.create_food_item(draft.to_payload())
            item = parse_food_item(payload)
        except (httpx.HTTPError, KeyError, TypeError, ValueError):
            logger.exception("Failed to add food item")
            self.banners.error(ADD_FAILED)
            return None
        self.collection.append(item)
        self.banners.success(ADDED)
        return item

    def open_edit(self, item: FoodItem) -> EditForm:
        """Open the edit surface for an item."""
        draft = FoodItemDraft.from_item(item)
        return EditForm(item_id=item.id, values=draft.model_dump())

    async def edit(
        self, form: EditForm, changes: Mapping[str, object] | None = None
    ) -> bool:
        """Submit the edit surface; it closes only on success."""
        self.banners.clear()
        form.error = None
        if changes:
            form.values = {**form.values, **changes}
        if not str(form.values.get("name") or "").strip():
            form.error = NAME_REQUIRED
            return False
        try:
            draft = FoodItemDraft.model_validate(form.values)
        except ValidationError as exc:
            form.error = first_error_message(exc)
            return False
        try:
            payload = await self.client.update_food_item(
                form.item_id, draft.to_payload()
            )
            item = parse_food_item(payload)
        except (httpx.HTTPError, KeyError, TypeError, ValueError):
            logger.exception(
                "Failed to update food item", extra={"item_id": form.item_id}
            )
            form.error = UPDATE_FAILED
            return False
        self.collection.replace(item)
        self.banners.success(UPDATED)
        form.is_open = False
        return True

    async def delete(self, item_id: int | str, confirm: Callable[[str], bool]) -> bool:
        """Delete an item once the user has confirmed it."""
        if not confirm(DELETE_PROMPT):
            return False
        self.banners.clear()
        try:
            await self.client.delete_food_item(item_id)
        except httpx.HTTPError:
            logger.exception("Failed to delete food item", extra={"item_id": item_id})
            self.banners.error(DELETE_FAILED)
            return False
        self.collection.remove(item_id)
        self.banners.success(DELETED)
        return True
