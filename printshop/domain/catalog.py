from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from printshop.domain.user import utcnow


def line_total(unit_price: float, amount: int) -> float:
    return round(unit_price * amount, 2)


class ProductCategory(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    name: str
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def rename(self, new_name: str) -> "ProductCategory":
        return self.model_copy(update={"name": new_name, "updated_at": utcnow()})


class Product(BaseModel):
    """A print job owned by the user who created it.

    ``sub_total`` always equals ``unit_price * amount``; every way of building
    or changing a product goes through :meth:`create` or :meth:`with_changes`
    which recompute it. Once ``is_purchased`` is set the product is locked.
    """
    id: UUID = Field(default_factory=uuid4)
    user_id: UUID
    category_id: UUID | None = None
    size: str
    material: str
    shape: str
    printing_side: str
    parcel_color: list[str]
    ink_color: list[str]
    unit_price: float
    amount: int
    sub_total: float = 0
    is_purchased: bool = False
    note: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @classmethod
    def create(cls, **fields) -> "Product":
        product = cls(**fields)
        product.sub_total = line_total(product.unit_price, product.amount)
        return product

    def with_changes(self, changes: dict) -> "Product":
        # unit_price / amount はマージ後の実効値で小計を再計算する
        unit_price = changes.get("unit_price", self.unit_price)
        amount = changes.get("amount", self.amount)
        return self.model_copy(update={
            **changes,
            "sub_total": line_total(unit_price, amount),
            "updated_at": utcnow(),
        })

    def mark_purchased(self) -> "Product":
        return self.model_copy(update={"is_purchased": True, "updated_at": utcnow()})
