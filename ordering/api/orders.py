"""
Ordering Service — Orders API

  GET  /orders                  admin board, newest first, optional ?status=
  POST /orders                  create an order record directly
  GET  /orders/{id}             status polling
  PUT  /orders/{id}             operator override (any status, bypasses the table)
  POST /orders/{id}/advance     one forward step along NEXT_STATUS
  GET  /orders/{id}/history     status audit trail
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ordering.api.deps import get_order_store
from ordering.core.status_machine import InvalidTransitionError, next_status
from ordering.db.order_store import OrderStore
from ordering.models.order import Order, OrderStatus, StatusChangeSource
from ordering.schemas.order import (
    OrderCreateRequest,
    OrderResponse,
    StatusEventResponse,
    StatusUpdateRequest,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/orders", tags=["orders"])


async def _get_or_404(store: OrderStore, order_id: str) -> Order:
    order = await store.find_by_id(order_id)
    if order is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found.")
    return order


@router.get("", response_model=list[OrderResponse])
async def list_orders(
    status_filter: OrderStatus | None = Query(None, alias="status", description="Filter by status"),
    store: OrderStore = Depends(get_order_store),
):
    filters = {"status": status_filter.value} if status_filter else None
    return await store.find(filters)


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order(payload: OrderCreateRequest, store: OrderStore = Depends(get_order_store)):
    order = Order(
        items=[item.model_dump(mode="json", exclude_none=True) for item in payload.items],
        total=payload.total,
        user_id=payload.user_id,
        status=OrderStatus.PENDING.value,
        special_instructions=payload.special_instructions,
        customer_name=payload.customer_name,
        customer_email=payload.customer_email,
        customer_phone=payload.customer_phone,
    )
    order_id = await store.create(order)
    return await store.find_by_id(order_id)


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, store: OrderStore = Depends(get_order_store)):
    return await _get_or_404(store, order_id)


@router.put("/{order_id}", response_model=OrderResponse)
async def override_order_status(
    order_id: str,
    payload: StatusUpdateRequest,
    store: OrderStore = Depends(get_order_store),
):
    """
    Operator override: set any status directly (error correction).
    Setting the current status is a no-op that still succeeds.
    """
    order = await _get_or_404(store, order_id)
    if order.status == payload.status.value:
        return order

    logger.warning("Operator override on order %s: %s -> %s", order_id, order.status, payload.status.value)
    return await store.update_by_id(
        order_id, source=StatusChangeSource.OVERRIDE.value, status=payload.status.value
    )


@router.post("/{order_id}/advance", response_model=OrderResponse)
async def advance_order(order_id: str, store: OrderStore = Depends(get_order_store)):
    """Manually advance an order to the next stage (kitchen staff action)."""
    order = await _get_or_404(store, order_id)
    try:
        target = next_status(order.status)
    except InvalidTransitionError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return await store.update_by_id(order_id, source=StatusChangeSource.ADVANCE.value, status=target.value)


@router.get("/{order_id}/history", response_model=list[StatusEventResponse])
async def order_history(order_id: str, store: OrderStore = Depends(get_order_store)):
    await _get_or_404(store, order_id)
    return await store.history(order_id)
