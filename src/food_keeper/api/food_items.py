"""Food item endpoints of the front-end service."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.responses import JSONResponse

from food_keeper.api.guards import require_admission
from food_keeper.api.models import FoodItemBody
from food_keeper.errors import OperationFailed, ValidationFailed
from food_keeper.services.mutations import DELETE_PROMPT

if TYPE_CHECKING:
    from food_keeper.containers import AppContainer
    from food_keeper.domain.food_items import FoodItem

router = APIRouter(
    prefix="/food-items",
    tags=["food-items"],
    dependencies=[Depends(require_admission)],
)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=None)
async def add_food_item(
    body: FoodItemBody, request: Request
) -> dict[str, object] | JSONResponse:
    """Create a food item."""
    container: AppContainer = request.app.state.container
    item = await container.mutations.add(body.model_dump(exclude_none=True))
    if item is None:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": container.banners.error_text},
        )
    return {"item": item_json(item), "success": container.banners.success_text}


@router.put("/{item_id}", response_model=None)
async def edit_food_item(
    item_id: str, body: FoodItemBody, request: Request
) -> dict[str, object] | JSONResponse:
    """Apply an edit to a food item."""
    container: AppContainer = request.app.state.container
    item = container.food_items.find(item_id)
    if item is None:
        # The local list may predate the item; reload once before giving up.
        await container.food_items.load()
        item = container.food_items.find(item_id)
    if item is None:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": "Food item not found"},
        )
    form = container.mutations.open_edit(item)
    saved = await container.mutations.edit(form, body.model_dump(exclude_unset=True))
    if not saved:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": form.error, "open": form.is_open},
        )
    updated = container.food_items.find(item_id)
    return {
        "item": item_json(updated) if updated else None,
        "success": container.banners.success_text,
    }


@router.delete("/{item_id}", response_model=None)
async def delete_food_item(
    item_id: str, request: Request, confirm: bool = False
) -> dict[str, object] | JSONResponse:
    """Delete a food item; requires ``confirm=true``."""
    container: AppContainer = request.app.state.container
    if not confirm:
        return JSONResponse(
            status_code=status.HTTP_428_PRECONDITION_REQUIRED,
            content={"confirm": DELETE_PROMPT},
        )
    deleted = await container.mutations.delete(item_id, confirm=lambda _prompt: True)
    if not deleted:
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"error": container.banners.error_text},
        )
    return {"success": container.banners.success_text}


@router.get("/export", response_model=None)
async def export_food_items(
    request: Request,
    start_date: date | None = Query(default=None, alias="startDate"),
    end_date: date | None = Query(default=None, alias="endDate"),
) -> Response:
    """Download the food history as CSV."""
    container: AppContainer = request.app.state.container
    try:
        export = await container.export_service.export(start_date, end_date)
    except ValidationFailed as exc:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content={"error": exc.message}
        )
    except OperationFailed as exc:
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY, content={"error": exc.message}
        )
    return Response(
        content=export.content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
    )


def item_json(item: FoodItem) -> dict[str, object]:
    """Serialize a food item for the views."""
    return {
        "id": item.id,
        "name": item.name,
        "description": item.description,
        "calorie": item.calorie,
        "quantity": item.quantity,
        "consumedDate": item.consumed_date.isoformat() if item.consumed_date else None,
        "createdAt": item.created_at.isoformat() if item.created_at else None,
    }
