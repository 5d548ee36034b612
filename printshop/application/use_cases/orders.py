import logging
from uuid import UUID

from printshop.application.dto import OrderInput, OrderUpdateInput, Page, PageRequest
from printshop.application.ports import UnitOfWork
from printshop.application.use_cases.operations import operation
from printshop.domain.access import (
    Action,
    ResourceKind,
    RowFilter,
    authorize,
    authorize_collection,
    row_filter,
)
from printshop.domain.catalog import Product
from printshop.domain.errors import BadRequestError, ConflictError, NotFoundError
from printshop.domain.order import Order
from printshop.domain.user import Actor

logger = logging.getLogger(__name__)


class OrderService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    def _collect_products(self, actor: Actor, product_ids: list[UUID]) -> list[Product]:
        products = []
        for product_id in product_ids:
            product = self.uow.products.get(product_id)
            if product is None:
                # 1件でも見つからなければ注文全体を中止する
                raise NotFoundError(f"Product with ID {product_id} not found")
            authorize(actor, ResourceKind.PRODUCT, product, Action.READ)
            if product.is_purchased:
                raise ConflictError(f"Product with ID {product_id} is already purchased")
            products.append(product)
        return products

    @operation("create order")
    def create_order(self, actor: Actor, input: OrderInput) -> Order:
        """Place an order for the given products in a single transaction.

        Line prices come from the stored products, never from the request.
        The products and their files are marked purchased and removed from
        the actor's cart as part of the same transaction.
        """
        authorize_collection(actor, ResourceKind.ORDER, Action.CREATE)
        product_ids = [line.product_id for line in input.items]
        if len(set(product_ids)) != len(product_ids):
            raise BadRequestError("Each product can appear only once in an order")

        with self.uow:
            products = self._collect_products(actor, product_ids)
            order = Order.place(actor.id, products, input.shipping_fee, input.shipping_method)
            self.uow.orders.add(order)
            for product in products:
                self.uow.products.update(product.mark_purchased())
            self.uow.files.mark_purchased(product_ids)
            self.uow.carts.delete_for_products(actor.id, product_ids)
            self.uow.commit()
        logger.info("Order %s placed with %d line(s), sub total %.2f",
                    order.id, len(order.lines), order.order_sub_total)
        return order

    @operation("find all orders")
    def list_orders(self, actor: Actor, page: PageRequest) -> Page[Order]:
        where = row_filter(actor, ResourceKind.ORDER)
        with self.uow:
            orders = self.uow.orders.list_page(where, page.skip, page.limit)
            total = self.uow.orders.count(where)
        return Page.build(orders, total, page)

    @operation("find orders of user")
    def list_orders_for_user(self, actor: Actor, user_id: UUID, page: PageRequest) -> Page[Order]:
        where = RowFilter(owner_id=user_id)
        with self.uow:
            if self.uow.users.get(user_id) is None:
                raise NotFoundError("User not found")
            authorize_collection(actor, ResourceKind.ORDER, Action.READ, owner_id=user_id)
            orders = self.uow.orders.list_page(where, page.skip, page.limit)
            total = self.uow.orders.count(where)
        return Page.build(orders, total, page)

    @operation("find order")
    def get_order(self, actor: Actor, order_id: UUID) -> Order:
        with self.uow:
            return authorize(actor, ResourceKind.ORDER, self.uow.orders.get(order_id), Action.READ)

    @operation("update order")
    def update_order(self, actor: Actor, order_id: UUID, input: OrderUpdateInput) -> Order:
        with self.uow:
            order = authorize(actor, ResourceKind.ORDER, self.uow.orders.get(order_id), Action.UPDATE)
            order = order.change_status(input.status)
            self.uow.orders.update(order)
            self.uow.commit()
        return order

    @operation("delete order")
    def delete_order(self, actor: Actor, order_id: UUID) -> None:
        with self.uow:
            authorize(actor, ResourceKind.ORDER, self.uow.orders.get(order_id), Action.DELETE)
            self.uow.orders.delete(order_id)
            self.uow.commit()
