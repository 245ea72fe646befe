import asyncio
from datetime import date

import httpx
import pytest

from food_keeper.errors import OperationFailed, ValidationFailed
from food_keeper.services.export import (
    EXPORT_FAILED,
    INVALID_RANGE,
    ExportService,
    export_filename,
)
from tests.conftest import FakeFoodKeeperClient, InMemoryTokenStorage, http_error


def _service() -> tuple[ExportService, FakeFoodKeeperClient]:
    client = FakeFoodKeeperClient(token_storage=InMemoryTokenStorage(token="t"))
    return ExportService(client), client


@pytest.mark.parametrize(
    ("start_date", "end_date", "expected"),
    [
        (date(2024, 1, 1), date(2024, 1, 31), "food_items_2024-01-01_to_2024-01-31.csv"),
        (date(2024, 1, 1), None, "food_items_from_2024-01-01.csv"),
        (None, date(2024, 1, 31), "food_items_all_time.csv"),
        (None, None, "food_items_all_time.csv"),
    ],
)
def test_export_filename(
    start_date: date | None, end_date: date | None, expected: str
) -> None:
    assert export_filename(start_date, end_date) == expected


def test_export_downloads_csv_for_range() -> None:
    service, client = _service()

    export = asyncio.run(service.export(date(2024, 1, 1), date(2024, 1, 31)))

    assert export.filename == "food_items_2024-01-01_to_2024-01-31.csv"
    assert export.content.startswith(b"ID,Name")
    assert client.calls == [("export_csv", (date(2024, 1, 1), date(2024, 1, 31)))]


def test_export_rejects_inverted_range_before_calling_backend() -> None:
    service, client = _service()

    with pytest.raises(ValidationFailed) as excinfo:
        asyncio.run(service.export(date(2024, 2, 1), date(2024, 1, 1)))

    assert excinfo.value.message == INVALID_RANGE
    assert client.calls == []


@pytest.mark.parametrize(
    "failure",
    [http_error(500, path="/food-items/export/csv"), httpx.ReadTimeout("timed out")],
)
def test_export_failure_raises_operation_failed(failure: Exception) -> None:
    service, client = _service()
    client.failures["export_csv"] = failure

    with pytest.raises(OperationFailed) as excinfo:
        asyncio.run(service.export())

    assert excinfo.value.message == EXPORT_FAILED
