"""
Ordering Service — Per-user routes (JWT required, see JWTAuthMiddleware)
"""
from fastapi import APIRouter, Depends, Request

from ordering.api.deps import get_order_store
from ordering.db.order_store import OrderStore
from ordering.schemas.order import OrderResponse

router = APIRouter(prefix="/user", tags=["user"])


@router.get("/orders", response_model=list[OrderResponse])
async def list_user_orders(request: Request, store: OrderStore = Depends(get_order_store)):
    """Orders placed by the token's subject, newest first."""
    user = request.state.user
    return await store.find({"user_id": str(user["sub"])})
