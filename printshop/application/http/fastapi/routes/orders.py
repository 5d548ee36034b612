from uuid import UUID

from fastapi import APIRouter, Depends, status

from printshop.application.dto import OrderInput, OrderUpdateInput, PageRequest, PaymentInput
from printshop.application.http.fastapi.deps import (
    get_current_actor,
    get_order_service,
    get_page,
    get_payment_service,
)
from printshop.application.http.fastapi.schemas import Envelope, PageEnvelope, ok
from printshop.application.use_cases.orders import OrderService
from printshop.application.use_cases.payments import PaymentService
from printshop.domain.user import Actor

router = APIRouter(prefix="/api/v1/orders", tags=["orders"])
payment_router = APIRouter(prefix="/api/v1/payment", tags=["payment"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=Envelope)
def create_order(
    data: OrderInput,
    actor: Actor = Depends(get_current_actor),
    orders: OrderService = Depends(get_order_service),
):
    return ok(orders.create_order(actor, data), "Order created successfully")


@router.get("", response_model=PageEnvelope)
def list_orders(
    page: PageRequest = Depends(get_page),
    actor: Actor = Depends(get_current_actor),
    orders: OrderService = Depends(get_order_service),
):
    return PageEnvelope.of(orders.list_orders(actor, page))


@router.get("/user/{user_id}", response_model=PageEnvelope)
def list_orders_for_user(
    user_id: UUID,
    page: PageRequest = Depends(get_page),
    actor: Actor = Depends(get_current_actor),
    orders: OrderService = Depends(get_order_service),
):
    return PageEnvelope.of(orders.list_orders_for_user(actor, user_id, page))


@router.get("/{order_id}", response_model=Envelope)
def get_order(
    order_id: UUID,
    actor: Actor = Depends(get_current_actor),
    orders: OrderService = Depends(get_order_service),
):
    return ok(orders.get_order(actor, order_id))


@router.put("/{order_id}", response_model=Envelope)
def update_order(
    order_id: UUID,
    data: OrderUpdateInput,
    actor: Actor = Depends(get_current_actor),
    orders: OrderService = Depends(get_order_service),
):
    return ok(orders.update_order(actor, order_id, data), "Order updated successfully")


@router.delete("/{order_id}", response_model=Envelope)
def delete_order(
    order_id: UUID,
    actor: Actor = Depends(get_current_actor),
    orders: OrderService = Depends(get_order_service),
):
    orders.delete_order(actor, order_id)
    return ok(message="Order deleted successfully")


@payment_router.post("", status_code=status.HTTP_201_CREATED, response_model=Envelope)
def create_payment(
    data: PaymentInput,
    actor: Actor = Depends(get_current_actor),
    payments: PaymentService = Depends(get_payment_service),
):
    return ok(payments.create_payment(actor, data), "Payment created successfully")
