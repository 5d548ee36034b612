from datetime import datetime
from uuid import UUID, uuid4
import enum

from pydantic import BaseModel, ConfigDict, Field, computed_field

from printshop.domain.catalog import Product, line_total
from printshop.domain.user import utcnow


class OrderStatus(str, enum.Enum):
    PENDING = "PENDING"
    AWAITING_PAYMENT = "AWAITING_PAYMENT"
    PAID = "PAID"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELED = "CANCELED"

##################################
# エンティティ
##################################

class OrderLine(BaseModel):
    """A product snapshot taken when the order was placed."""
    id: UUID = Field(default_factory=uuid4)
    order_id: UUID
    product_id: UUID
    unit_price: float
    amount: int
    sub_total: float
    model_config = ConfigDict(frozen=True)

    @classmethod
    def snapshot(cls, order_id: UUID, product: Product) -> "OrderLine":
        return cls(
            order_id=order_id,
            product_id=product.id,
            unit_price=product.unit_price,
            amount=product.amount,
            sub_total=line_total(product.unit_price, product.amount),
        )

###################################
# 集約ルート (OrderLineはOrderを通じてのみ作成される)
###################################

class Order(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    user_id: UUID
    order_sub_total: float = 0
    shipping_fee: float
    shipping_method: str
    payment_id: UUID | None = None
    status: OrderStatus = OrderStatus.PENDING
    lines: list[OrderLine] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @classmethod
    def place(
        cls,
        user_id: UUID,
        products: list[Product],
        shipping_fee: float,
        shipping_method: str,
    ) -> "Order":
        """Build an order whose lines and subtotal come from ``products``.

        Prices are read from the products as they are now and copied into the
        lines, so a later price change never alters this order's total.
        """
        order = cls(user_id=user_id, shipping_fee=shipping_fee, shipping_method=shipping_method)
        order.lines = [OrderLine.snapshot(order.id, product) for product in products]
        order.order_sub_total = round(sum(line.sub_total for line in order.lines), 2)
        return order

    @computed_field
    @property
    def total(self) -> float:
        return round(self.order_sub_total + self.shipping_fee, 2)

    def change_status(self, status: OrderStatus) -> "Order":
        return self.model_copy(update={"status": status, "updated_at": utcnow()})

    def await_payment(self, payment_id: UUID) -> "Order":
        return self.model_copy(update={
            "payment_id": payment_id,
            "status": OrderStatus.AWAITING_PAYMENT,
            "updated_at": utcnow(),
        })


class CartItem(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    user_id: UUID
    product_id: UUID
    amount: int
    sub_total: float
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @classmethod
    def for_product(cls, user_id: UUID, product: Product, amount: int) -> "CartItem":
        return cls(
            user_id=user_id,
            product_id=product.id,
            amount=amount,
            sub_total=line_total(product.unit_price, amount),
        )

    def change_amount(self, amount: int, unit_price: float) -> "CartItem":
        return self.model_copy(update={
            "amount": amount,
            "sub_total": line_total(unit_price, amount),
            "updated_at": utcnow(),
        })


class Payment(BaseModel):
    """Created once per payment initiation, never changed afterwards."""
    id: UUID = Field(default_factory=uuid4)
    order_id: UUID
    ref_no: str
    product_detail: str
    customer_email: str
    currency_code: str
    total: float
    channel: str
    lang: str
    created_at: datetime = Field(default_factory=utcnow)
    model_config = ConfigDict(frozen=True)
