from datetime import datetime
from math import ceil
from typing import ClassVar, Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

from printshop.domain.catalog import Product
from printshop.domain.errors import BadRequestError
from printshop.domain.file import StoredFile
from printshop.domain.order import OrderStatus
from printshop.domain.user import Role, User

# DTO(Data Transfer Object - データ転送オブジェクト)

T = TypeVar("T")


class PageRequest(BaseModel):
    page: int
    limit: int
    model_config = ConfigDict(frozen=True)

    @classmethod
    def of(cls, page: int, limit: int) -> "PageRequest":
        if page < 1 or limit < 1:
            raise BadRequestError("Invalid page or limit value")
        return cls(page=page, limit=limit)

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


class Page(BaseModel, Generic[T]):
    items: list[T]
    total: int
    page: int
    total_pages: int

    @classmethod
    def build(cls, items: list[T], total: int, request: PageRequest) -> "Page[T]":
        return cls(items=items, total=total, page=request.page, total_pages=ceil(total / request.limit))


class _Changes(BaseModel):
    """Partial update record: only the fields the caller actually sent.

    An explicit null clears a field, which is allowed only for the names in
    ``nullable``; any other field sent as null is rejected.
    """

    nullable: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="after")
    def reject_nulls(self):
        for name in sorted(self.model_fields_set - self.nullable):
            if getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)

#
# 認証
#
class RegisterInput(BaseModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=6)
    phone: str = Field(min_length=1)


class LoginInput(BaseModel):
    email: str
    password: str


class UserOutput(BaseModel):
    id: UUID
    first_name: str
    last_name: str
    email: str
    phone: str
    role: Role
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserOutput":
        return cls.model_validate(user.model_dump(exclude={"password_hash"}))


class TokenOutput(BaseModel):
    token: str
    user: UserOutput

#
# ユーザー / 住所
#
class UserUpdateInput(_Changes):
    first_name: str | None = Field(default=None, min_length=1)
    last_name: str | None = Field(default=None, min_length=1)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, min_length=1)
    password: str | None = Field(default=None, min_length=6)
    role: Role | None = None


class AddressInput(BaseModel):
    receiver_name: str = Field(min_length=1)
    address: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    sub_district: str | None = None
    district: str | None = None
    province: str | None = None
    country: str = Field(min_length=1)
    postal_code: str = Field(min_length=1)
    tax_payer_id: str | None = None
    tax_payer_name: str | None = None


class AddressUpdateInput(_Changes):
    nullable = frozenset({"sub_district", "district", "province", "tax_payer_id", "tax_payer_name"})

    receiver_name: str | None = Field(default=None, min_length=1)
    address: str | None = Field(default=None, min_length=1)
    phone: str | None = Field(default=None, min_length=1)
    sub_district: str | None = None
    district: str | None = None
    province: str | None = None
    country: str | None = Field(default=None, min_length=1)
    postal_code: str | None = Field(default=None, min_length=1)
    tax_payer_id: str | None = None
    tax_payer_name: str | None = None

#
# カタログ
#
class CategoryInput(BaseModel):
    name: str = Field(min_length=1)


class ProductInput(BaseModel):
    category_id: UUID | None = None
    size: str = Field(min_length=1)
    material: str = Field(min_length=1)
    shape: str = Field(min_length=1)
    printing_side: str = Field(min_length=1)
    parcel_color: list[str] = Field(min_length=1)
    ink_color: list[str] = Field(min_length=1)
    unit_price: float = Field(gt=0)
    amount: int = Field(gt=0)
    note: str | None = None


class ProductUpdateInput(_Changes):
    nullable = frozenset({"category_id", "note"})

    category_id: UUID | None = None
    size: str | None = Field(default=None, min_length=1)
    material: str | None = Field(default=None, min_length=1)
    shape: str | None = Field(default=None, min_length=1)
    printing_side: str | None = Field(default=None, min_length=1)
    parcel_color: list[str] | None = Field(default=None, min_length=1)
    ink_color: list[str] | None = Field(default=None, min_length=1)
    unit_price: float | None = Field(default=None, gt=0)
    amount: int | None = Field(default=None, gt=0)
    note: str | None = None
    is_purchased: bool | None = None

#
# ファイル
#
class Upload(BaseModel):
    filename: str
    content_type: str
    data: bytes


class FileUpdateInput(_Changes):
    display_name: str | None = Field(default=None, min_length=1)
    is_purchased: bool | None = None


class FileOutput(BaseModel):
    file: StoredFile
    url: str


class ProductWithFileOutput(BaseModel):
    product: Product
    file: StoredFile


class SweepResult(BaseModel):
    deleted: int = 0
    failed: int = 0

#
# カート / 注文 / 決済
#
class CartItemInput(BaseModel):
    product_id: UUID
    amount: int = Field(gt=0)


class CartItemUpdateInput(BaseModel):
    amount: int = Field(gt=0)


class OrderLineInput(BaseModel):
    product_id: UUID


class OrderInput(BaseModel):
    # 明細の金額はクライアントから受け取らない (サーバー側で再計算する)
    items: list[OrderLineInput] = Field(min_length=1)
    shipping_fee: float = Field(ge=0)
    shipping_method: str = Field(min_length=1)


class OrderUpdateInput(BaseModel):
    status: OrderStatus


class PaymentInput(BaseModel):
    order_id: UUID
    customer_email: EmailStr
    product_detail: str = Field(min_length=1)
    currency_code: str = Field(min_length=1)
    lang: str = Field(min_length=1)
    channel: str = Field(min_length=1)


class PaymentOutput(BaseModel):
    payment_id: UUID
    redirect_url: str
    status: str
    status_name: str
