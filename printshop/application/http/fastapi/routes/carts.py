from uuid import UUID

from fastapi import APIRouter, Depends, status

from printshop.application.dto import CartItemInput, CartItemUpdateInput, PageRequest
from printshop.application.http.fastapi.deps import get_cart_service, get_current_actor, get_page
from printshop.application.http.fastapi.schemas import Envelope, PageEnvelope, ok
from printshop.application.use_cases.carts import CartService
from printshop.domain.user import Actor

router = APIRouter(prefix="/api/v1/carts", tags=["carts"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=Envelope)
def add_item(
    data: CartItemInput,
    actor: Actor = Depends(get_current_actor),
    carts: CartService = Depends(get_cart_service),
):
    return ok(carts.add_item(actor, data), "Product added to cart")


@router.get("", response_model=PageEnvelope)
def list_items(
    page: PageRequest = Depends(get_page),
    actor: Actor = Depends(get_current_actor),
    carts: CartService = Depends(get_cart_service),
):
    return PageEnvelope.of(carts.list_items(actor, page))


@router.get("/{item_id}", response_model=Envelope)
def get_item(
    item_id: UUID,
    actor: Actor = Depends(get_current_actor),
    carts: CartService = Depends(get_cart_service),
):
    return ok(carts.get_item(actor, item_id))


@router.put("/{item_id}", response_model=Envelope)
def update_item(
    item_id: UUID,
    data: CartItemUpdateInput,
    actor: Actor = Depends(get_current_actor),
    carts: CartService = Depends(get_cart_service),
):
    return ok(carts.update_item(actor, item_id, data), "Cart item updated successfully")


@router.delete("/{item_id}", response_model=Envelope)
def delete_item(
    item_id: UUID,
    actor: Actor = Depends(get_current_actor),
    carts: CartService = Depends(get_cart_service),
):
    carts.delete_item(actor, item_id)
    return ok(message="Cart item deleted successfully")
