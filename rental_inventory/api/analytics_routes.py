"""Inventory analytics routes: counts by status and a stock summary."""

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from rental_inventory.config import LOW_STOCK_THRESHOLD
from rental_inventory.db.repositories import inventory_repo

from .responses import success

router = APIRouter(prefix="/api/analytics/inventory", tags=["analytics"])


@router.get("/by-status")
def analytics_by_status(
    show_deleted: bool = Query(False, alias="showDeleted"),
) -> JSONResponse:
    """Return item counts for every status (zero when unused)."""
    counts = inventory_repo.count_items_by_status(show_deleted)
    items = [{"status": s, "count": c} for s, c in counts.items()]
    return success("Inventory counts by status", {"items": items, "total": sum(counts.values())})


@router.get("/summary")
def analytics_summary() -> JSONResponse:
    """Return totals for visible items, low-stock count and number of soft-deleted items."""
    summary = inventory_repo.stock_summary()
    return success(
        "Inventory summary",
        {
            "totalItems": summary["total_items"],
            "totalQuantity": summary["total_quantity"],
            "lowStockItems": summary["low_stock_items"],
            "lowStockThreshold": LOW_STOCK_THRESHOLD,
            "deletedItems": summary["deleted_items"],
        },
    )
