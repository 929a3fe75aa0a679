"""
Ordering Service — Auto-progression trigger

Called by the order tracking page on an interval (or by cron). Each call
runs exactly one sweep.
"""
from fastapi import APIRouter, Depends

from ordering.api.deps import get_progression_engine
from ordering.schemas.order import SweepResponse
from ordering.services.progression import AutoProgressionEngine

router = APIRouter(tags=["kitchen"])


@router.api_route("/auto-progress", methods=["GET", "POST"], response_model=SweepResponse)
async def auto_progress(engine: AutoProgressionEngine = Depends(get_progression_engine)):
    result = await engine.sweep()
    return SweepResponse(
        message=f"Processed {result.examined} orders, updated {result.advanced}",
        examined=result.examined,
        updated_count=result.advanced,
    )
