from abc import ABC, abstractmethod
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from printshop.domain.access import RowFilter
from printshop.domain.catalog import Product, ProductCategory
from printshop.domain.file import StoredFile
from printshop.domain.order import CartItem, Order, Payment
from printshop.domain.user import Actor, Address, User

#
# リポジトリ
#
class UserRepository(ABC):
    @abstractmethod
    def add(self, user: User) -> None: ...

    @abstractmethod
    def get(self, user_id: UUID) -> User | None: ...

    @abstractmethod
    def get_by_email(self, email: str) -> User | None: ...

    @abstractmethod
    def list_page(self, where: RowFilter, skip: int, take: int) -> list[User]: ...

    @abstractmethod
    def count(self, where: RowFilter) -> int: ...

    @abstractmethod
    def update(self, user: User) -> None: ...

    @abstractmethod
    def delete(self, user_id: UUID) -> None: ...


class AddressRepository(ABC):
    @abstractmethod
    def add(self, address: Address) -> None: ...

    @abstractmethod
    def get_by_user_id(self, user_id: UUID) -> Address | None: ...

    @abstractmethod
    def update(self, address: Address) -> None: ...

    @abstractmethod
    def delete_by_user_id(self, user_id: UUID) -> None: ...


class CategoryRepository(ABC):
    @abstractmethod
    def add(self, category: ProductCategory) -> None: ...

    @abstractmethod
    def get(self, category_id: UUID) -> ProductCategory | None: ...

    @abstractmethod
    def list_page(self, skip: int, take: int) -> list[ProductCategory]: ...

    @abstractmethod
    def count(self) -> int: ...

    @abstractmethod
    def update(self, category: ProductCategory) -> None: ...

    @abstractmethod
    def delete(self, category_id: UUID) -> None: ...


class ProductRepository(ABC):
    @abstractmethod
    def add(self, product: Product) -> None: ...

    @abstractmethod
    def get(self, product_id: UUID) -> Product | None: ...

    @abstractmethod
    def list_page(
        self, where: RowFilter, skip: int, take: int, category_id: UUID | None = None
    ) -> list[Product]: ...

    @abstractmethod
    def count(self, where: RowFilter, category_id: UUID | None = None) -> int: ...

    @abstractmethod
    def update(self, product: Product) -> None: ...

    @abstractmethod
    def delete(self, product_id: UUID) -> None: ...


class FileRepository(ABC):
    @abstractmethod
    def add(self, file: StoredFile) -> None: ...

    @abstractmethod
    def get(self, file_id: UUID) -> StoredFile | None: ...

    @abstractmethod
    def list_by_product(self, product_id: UUID) -> list[StoredFile]: ...

    @abstractmethod
    def list_unpurchased_before(self, cutoff: datetime) -> list[StoredFile]: ...

    @abstractmethod
    def mark_purchased(self, product_ids: list[UUID]) -> None: ...

    @abstractmethod
    def update(self, file: StoredFile) -> None: ...

    @abstractmethod
    def delete(self, file_id: UUID) -> None: ...


class CartRepository(ABC):
    @abstractmethod
    def add(self, item: CartItem) -> None: ...

    @abstractmethod
    def get(self, item_id: UUID) -> CartItem | None: ...

    @abstractmethod
    def list_page(self, where: RowFilter, skip: int, take: int) -> list[CartItem]: ...

    @abstractmethod
    def count(self, where: RowFilter) -> int: ...

    @abstractmethod
    def update(self, item: CartItem) -> None: ...

    @abstractmethod
    def delete(self, item_id: UUID) -> None: ...

    @abstractmethod
    def delete_for_products(self, user_id: UUID, product_ids: list[UUID]) -> None: ...


class OrderRepository(ABC):
    @abstractmethod
    def add(self, order: Order) -> None: ...

    @abstractmethod
    def get(self, order_id: UUID) -> Order | None: ...

    @abstractmethod
    def list_page(self, where: RowFilter, skip: int, take: int) -> list[Order]: ...

    @abstractmethod
    def count(self, where: RowFilter) -> int: ...

    @abstractmethod
    def update(self, order: Order) -> None: ...

    @abstractmethod
    def delete(self, order_id: UUID) -> None: ...


class PaymentRepository(ABC):
    @abstractmethod
    def add(self, payment: Payment) -> None: ...

    @abstractmethod
    def get(self, payment_id: UUID) -> Payment | None: ...


class UnitOfWork(ABC):
    @abstractmethod
    def __enter__(self) -> "UnitOfWork": ...

    @abstractmethod
    def __exit__(self, exc_type, exc_value, traceback) -> None: ...

    @property
    @abstractmethod
    def users(self) -> UserRepository: ...

    @property
    @abstractmethod
    def addresses(self) -> AddressRepository: ...

    @property
    @abstractmethod
    def categories(self) -> CategoryRepository: ...

    @property
    @abstractmethod
    def products(self) -> ProductRepository: ...

    @property
    @abstractmethod
    def files(self) -> FileRepository: ...

    @property
    @abstractmethod
    def carts(self) -> CartRepository: ...

    @property
    @abstractmethod
    def orders(self) -> OrderRepository: ...

    @property
    @abstractmethod
    def payments(self) -> PaymentRepository: ...

    @abstractmethod
    def commit(self) -> None: ...

    @abstractmethod
    def rollback(self) -> None: ...

#
# 外部サービス
#
class PasswordHasher(ABC):
    @abstractmethod
    def hash(self, raw: str) -> str: ...

    @abstractmethod
    def verify(self, raw: str, hashed: str) -> bool: ...


class TokenService(ABC):
    @abstractmethod
    def issue(self, actor: Actor) -> str: ...

    @abstractmethod
    def verify(self, token: str) -> Actor:
        """Return the actor named by ``token`` or raise UnauthorizedError."""


class StoredObject(BaseModel):
    key: str
    size: int
    type: str


class ObjectStorage(ABC):
    @abstractmethod
    def put(self, data: bytes, content_type: str, filename: str) -> StoredObject: ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Raise StorageError when the object could not be removed."""

    @abstractmethod
    def presigned_url(self, key: str, ttl_seconds: int) -> str: ...

    @abstractmethod
    def read_signed(self, key: str, token: str) -> tuple[bytes, str]:
        """Return ``(data, content_type)`` for a presigned read."""


class PaymentRequest(BaseModel):
    order_no: str
    ref_no: str
    product_detail: str
    customer_email: str
    currency_code: str
    total: float
    lang: str
    channel: str


class PaymentReceipt(BaseModel):
    order_no: str
    ref_no: str
    product_detail: str
    customer_email: str
    currency_code: str
    total: float
    lang: str
    channel: str
    redirect_url: str
    status: str
    status_name: str


class PaymentGateway(ABC):
    @abstractmethod
    def create_payment(self, request: PaymentRequest) -> PaymentReceipt:
        """Raise PaymentGatewayError on transport failure, timeout or bad reply."""
