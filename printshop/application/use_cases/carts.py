from uuid import UUID

from printshop.application.dto import CartItemInput, CartItemUpdateInput, Page, PageRequest
from printshop.application.ports import UnitOfWork
from printshop.application.use_cases.operations import operation
from printshop.domain.access import (
    Action,
    ResourceKind,
    authorize,
    authorize_collection,
    ensure_not_purchased,
    row_filter,
)
from printshop.domain.errors import NotFoundError
from printshop.domain.order import CartItem
from printshop.domain.user import Actor


class CartService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    @operation("add product to cart")
    def add_item(self, actor: Actor, input: CartItemInput) -> CartItem:
        authorize_collection(actor, ResourceKind.CART, Action.CREATE)
        with self.uow:
            product = authorize(actor, ResourceKind.PRODUCT, self.uow.products.get(input.product_id), Action.READ)
            ensure_not_purchased(product, ResourceKind.PRODUCT, Action.CREATE)
            # 単価はクライアントではなく商品から取る
            item = CartItem.for_product(actor.id, product, input.amount)
            self.uow.carts.add(item)
            self.uow.commit()
        return item

    @operation("find cart items")
    def list_items(self, actor: Actor, page: PageRequest) -> Page[CartItem]:
        where = row_filter(actor, ResourceKind.CART)
        with self.uow:
            items = self.uow.carts.list_page(where, page.skip, page.limit)
            total = self.uow.carts.count(where)
        return Page.build(items, total, page)

    @operation("find cart item")
    def get_item(self, actor: Actor, item_id: UUID) -> CartItem:
        with self.uow:
            return authorize(actor, ResourceKind.CART, self.uow.carts.get(item_id), Action.READ,
                             not_found="Cart item not found")

    @operation("update cart item")
    def update_item(self, actor: Actor, item_id: UUID, input: CartItemUpdateInput) -> CartItem:
        with self.uow:
            item = authorize(actor, ResourceKind.CART, self.uow.carts.get(item_id), Action.UPDATE,
                             not_found="Cart item not found")
            product = self.uow.products.get(item.product_id)
            if product is None:
                raise NotFoundError("Product not found")
            item = item.change_amount(input.amount, product.unit_price)
            self.uow.carts.update(item)
            self.uow.commit()
        return item

    @operation("delete cart item")
    def delete_item(self, actor: Actor, item_id: UUID) -> None:
        with self.uow:
            authorize(actor, ResourceKind.CART, self.uow.carts.get(item_id), Action.DELETE,
                      not_found="Cart item not found")
            self.uow.carts.delete(item_id)
            self.uow.commit()
