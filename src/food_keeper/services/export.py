"""CSV export of the food history."""

import logging
from dataclasses import dataclass
from datetime import date

import httpx

from food_keeper.adapters.food_keeper_client import FoodItemsClient
from food_keeper.errors import OperationFailed, ValidationFailed

logger = logging.getLogger(__name__)

EXPORT_FAILED = "Failed to export CSV. Please try again."
INVALID_RANGE = "Start date cannot be after end date"


@dataclass(frozen=True)
class CsvExport:
    """A downloaded CSV file."""

    filename: str
    content: bytes


@dataclass
class ExportService:
    """Download the food history as CSV for an optional date range."""

    client: FoodItemsClient

    async def export(
        self, start_date: date | None = None, end_date: date | None = None
    ) -> CsvExport:
        """Fetch the CSV.

        Raises ``ValidationFailed`` for an inverted range, before any call,
        and ``OperationFailed`` when the backend or transport fails.
        """
        if start_date and end_date and start_date > end_date:
            raise ValidationFailed(INVALID_RANGE)
        try:
            content = await self.client.export_csv(start_date, end_date)
        except httpx.HTTPError as exc:
            logger.exception("CSV export failed")
            raise OperationFailed(EXPORT_FAILED) from exc
        return CsvExport(filename=export_filename(start_date, end_date), content=content)


def export_filename(start_date: date | None, end_date: date | None) -> str:
    """Name the file after its date range; end-only ranges count as all time."""
    if start_date and end_date:
        return f"food_items_{start_date.isoformat()}_to_{end_date.isoformat()}.csv"
    if start_date:
        return f"food_items_from_{start_date.isoformat()}.csv"
    return "food_items_all_time.csv"
