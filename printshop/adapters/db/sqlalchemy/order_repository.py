from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from printshop.adapters.db.sqlalchemy import models
from printshop.adapters.db.sqlalchemy.filters import paged, scoped
from printshop.application.ports import CartRepository, OrderRepository, PaymentRepository
from printshop.domain.access import RowFilter
from printshop.domain.errors import ConflictError
from printshop.domain.order import CartItem, Order, OrderLine, OrderStatus, Payment


def _to_order(order_model: models.Order) -> Order:
    return Order(
        id=UUID(order_model.id),
        user_id=UUID(order_model.user_id),
        order_sub_total=order_model.order_sub_total,
        shipping_fee=order_model.shipping_fee,
        shipping_method=order_model.shipping_method,
        payment_id=UUID(order_model.payment_id) if order_model.payment_id else None,
        status=OrderStatus(order_model.status),
        lines=[
            OrderLine(
                id=UUID(line_model.id),
                order_id=UUID(line_model.order_id),
                product_id=UUID(line_model.product_id),
                unit_price=line_model.unit_price,
                amount=line_model.amount,
                sub_total=line_model.sub_total,
            ) for line_model in order_model.lines
        ],
        created_at=models.aware(order_model.created_at),
        updated_at=models.aware(order_model.updated_at),
    )


class SQLAlchemyOrderRepository(OrderRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, order: Order) -> None:
        order_model = models.Order(
            id=str(order.id),
            user_id=str(order.user_id),
            order_sub_total=order.order_sub_total,
            shipping_fee=order.shipping_fee,
            shipping_method=order.shipping_method,
            payment_id=str(order.payment_id) if order.payment_id else None,
            status=order.status.value,
            created_at=order.created_at,
            updated_at=order.updated_at,
            lines=[
                models.OrderLine(
                    id=str(line.id),
                    order_id=str(order.id),
                    product_id=str(line.product_id),
                    unit_price=line.unit_price,
                    amount=line.amount,
                    sub_total=line.sub_total,
                ) for line in order.lines
            ],
        )
        self.session.add(order_model)
        self.session.flush()

    def get(self, order_id: UUID) -> Order | None:
        order_model = self.session.get(models.Order, str(order_id))
        if order_model:
            return _to_order(order_model)
        return None

    def list_page(self, where: RowFilter, skip: int, take: int) -> list[Order]:
        query = scoped(self.session.query(models.Order), models.Order.user_id, where)
        order_models = paged(query, (models.Order.created_at, models.Order.id), skip, take).all()
        return [_to_order(order_model) for order_model in order_models]

    def count(self, where: RowFilter) -> int:
        return scoped(self.session.query(models.Order), models.Order.user_id, where).count()

    def update(self, order: Order) -> None:
        # 明細は作成時のスナップショットなので更新しない
        order_model = self.session.get(models.Order, str(order.id))
        order_model.status = order.status.value
        order_model.payment_id = str(order.payment_id) if order.payment_id else None
        order_model.updated_at = order.updated_at

    def delete(self, order_id: UUID) -> None:
        order_model = self.session.get(models.Order, str(order_id))
        if order_model:
            self.session.delete(order_model)


def _to_cart_item(cart_model: models.Cart) -> CartItem:
    return CartItem(
        id=UUID(cart_model.id),
        user_id=UUID(cart_model.user_id),
        product_id=UUID(cart_model.product_id),
        amount=cart_model.amount,
        sub_total=cart_model.sub_total,
        created_at=models.aware(cart_model.created_at),
        updated_at=models.aware(cart_model.updated_at),
    )


class SQLAlchemyCartRepository(CartRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, item: CartItem) -> None:
        self.session.add(models.Cart(
            id=str(item.id),
            user_id=str(item.user_id),
            product_id=str(item.product_id),
            amount=item.amount,
            sub_total=item.sub_total,
            created_at=item.created_at,
            updated_at=item.updated_at,
        ))
        try:
            self.session.flush()
        except IntegrityError as e:
            raise ConflictError("This product is already in the cart.") from e

    def get(self, item_id: UUID) -> CartItem | None:
        cart_model = self.session.get(models.Cart, str(item_id))
        if cart_model:
            return _to_cart_item(cart_model)
        return None

    def list_page(self, where: RowFilter, skip: int, take: int) -> list[CartItem]:
        query = scoped(self.session.query(models.Cart), models.Cart.user_id, where)
        cart_models = paged(query, (models.Cart.created_at, models.Cart.id), skip, take).all()
        return [_to_cart_item(cart_model) for cart_model in cart_models]

    def count(self, where: RowFilter) -> int:
        return scoped(self.session.query(models.Cart), models.Cart.user_id, where).count()

    def update(self, item: CartItem) -> None:
        cart_model = self.session.get(models.Cart, str(item.id))
        cart_model.amount = item.amount
        cart_model.sub_total = item.sub_total
        cart_model.updated_at = item.updated_at

    def delete(self, item_id: UUID) -> None:
        self.session.query(models.Cart).filter_by(id=str(item_id)).delete()

    def delete_for_products(self, user_id: UUID, product_ids: list[UUID]) -> None:
        if not product_ids:
            return
        (
            self.session.query(models.Cart)
            .filter(
                models.Cart.user_id == str(user_id),
                models.Cart.product_id.in_([str(product_id) for product_id in product_ids]),
            )
            .delete(synchronize_session=False)
        )


class SQLAlchemyPaymentRepository(PaymentRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, payment: Payment) -> None:
        self.session.add(models.Payment(
            id=str(payment.id),
            order_id=str(payment.order_id),
            ref_no=payment.ref_no,
            product_detail=payment.product_detail,
            customer_email=payment.customer_email,
            currency_code=payment.currency_code,
            total=payment.total,
            channel=payment.channel,
            lang=payment.lang,
            created_at=payment.created_at,
        ))

    def get(self, payment_id: UUID) -> Payment | None:
        payment_model = self.session.get(models.Payment, str(payment_id))
        if payment_model is None:
            return None
        return Payment(
            id=UUID(payment_model.id),
            order_id=UUID(payment_model.order_id),
            ref_no=payment_model.ref_no,
            product_detail=payment_model.product_detail,
            customer_email=payment_model.customer_email,
            currency_code=payment_model.currency_code,
            total=payment_model.total,
            channel=payment_model.channel,
            lang=payment_model.lang,
            created_at=models.aware(payment_model.created_at),
        )
