"""Domain models for logged food items."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500
QUANTITY_MAX_LENGTH = 50
CALORIE_MAX = 10000


class FilterTab(StrEnum):
    """Mutually exclusive category filters of the item list."""

    ALL = "all"
    RECENT = "recent"
    CONSUMED = "consumed"
    WITH_CALORIES = "with-calories"


@dataclass(frozen=True)
class FoodItem:
    """A food item as stored by the Food Service."""

    id: int | str
    name: str
    description: str | None
    calorie: int | None
    quantity: str | None
    consumed_date: datetime | None
    created_at: datetime | None


class FoodItemDraft(BaseModel):
    """User input for creating or updating a food item."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    description: str | None = None
    calorie: int | None = None
    quantity: str | None = None
    consumed_date: datetime | None = None

    @field_validator("name", mode="before")
    @classmethod
    def _require_name(cls, value: object) -> str:
        name = str(value or "").strip()
        if not name:
            raise ValueError("Please enter a food name")
        if len(name) > NAME_MAX_LENGTH:
            raise ValueError("Food name must not exceed 100 characters")
        return name

    @field_validator("description", "quantity", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> str | None:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @field_validator("description")
    @classmethod
    def _description_length(cls, value: str | None) -> str | None:
        if value is not None and len(value) > DESCRIPTION_MAX_LENGTH:
            raise ValueError("Description must not exceed 500 characters")
        return value

    @field_validator("quantity")
    @classmethod
    def _quantity_length(cls, value: str | None) -> str | None:
        if value is not None and len(value) > QUANTITY_MAX_LENGTH:
            raise ValueError("Quantity must not exceed 50 characters")
        return value

    @field_validator("calorie", mode="before")
    @classmethod
    def _parse_calorie(cls, value: object) -> int | None:
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        try:
            calorie = int(str(value).strip())
        except ValueError:
            raise ValueError("Calories must be a whole number") from None
        if calorie < 0:
            raise ValueError("Calories must be a positive number")
        if calorie > CALORIE_MAX:
            raise ValueError("Calories must not exceed 10000")
        return calorie

    @field_validator("consumed_date", mode="before")
    @classmethod
    def _blank_date(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def to_payload(self) -> dict[str, object]:
        """Serialize the draft for the Food Service."""
        payload = self.model_dump(by_alias=True)
        if self.consumed_date is not None:
            # The backend stores local wall-clock time without an offset.
            local = self.consumed_date
            if local.tzinfo is not None:
                local = local.astimezone().replace(tzinfo=None)
            payload["consumedDate"] = local.isoformat(timespec="minutes")
        return payload

    @classmethod
    def from_item(cls, item: FoodItem) -> "FoodItemDraft":
        """Pre-fill a draft from an existing item."""
        return cls(
            name=item.name,
            description=item.description,
            calorie=item.calorie,
            quantity=item.quantity,
            consumed_date=item.consumed_date,
        )


def parse_food_item(payload: dict[str, object]) -> FoodItem:
    """Parse a Food Service payload into a domain model."""
    calorie_raw = payload.get("calorie")
    return FoodItem(
        id=payload["id"],
        name=str(payload.get("name", "")).strip(),
        description=payload.get("description") or None,
        calorie=int(calorie_raw) if calorie_raw is not None else None,
        quantity=payload.get("quantity") or None,
        consumed_date=_parse_timestamp(payload.get("consumedDate")),
        created_at=_parse_timestamp(payload.get("createdAt")),
    )


def _parse_timestamp(raw: object) -> datetime | None:
    """Parse an ISO timestamp; naive values are taken as local time."""
    if not isinstance(raw, str) or not raw:
        return None
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.astimezone()
    return parsed
