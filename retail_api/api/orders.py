from typing import List

from fastapi import APIRouter, Depends, status

from retail_api.api.deps import RequestContext, get_request_context, require_admin
from retail_api.core.errors import NotFoundError
from retail_api.db.mongo import get_db
from retail_api.models.schemas import OrderCreate, OrderStatusUpdate, OrderOut, OrderStatusOut
from retail_api.services import orders_service

router = APIRouter()


def _owner_id(ctx: RequestContext):
    if not ctx.user:
        raise NotFoundError("User not found")
    return ctx.user["_id"]


@router.post("", response_model=OrderOut, status_code=status.HTTP_201_CREATED)
def create_order(payload: OrderCreate, ctx: RequestContext = Depends(get_request_context), db=Depends(get_db)):
    items = [item.model_dump() for item in payload.items or []]
    return orders_service.create_order(db, _owner_id(ctx), items, payload.totalPrice)

@router.get("", response_model=List[OrderOut])
def my_orders(ctx: RequestContext = Depends(get_request_context), db=Depends(get_db)):
    return orders_service.list_my_orders(db, _owner_id(ctx))

@router.get("/admin/all", response_model=List[OrderOut], dependencies=[Depends(require_admin)])
def all_orders(db=Depends(get_db)):
    return orders_service.list_all_orders(db)

@router.get("/{order_id}", response_model=OrderOut, dependencies=[Depends(get_request_context)])
def get_order(order_id: str, db=Depends(get_db)):
    return orders_service.get_order(db, order_id)

@router.put("/{order_id}/status", response_model=OrderStatusOut, dependencies=[Depends(require_admin)])
def update_status(order_id: str, payload: OrderStatusUpdate, db=Depends(get_db)):
    return orders_service.update_order_status(db, order_id, payload.orderStatus)
