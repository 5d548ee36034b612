from datetime import timedelta

from sqlalchemy.orm import sessionmaker

from printshop.adapters.db.sqlalchemy.uow import SQLAlchemyUnitOfWork, create_schema, create_session_factory
from printshop.adapters.payment.paysolutions import PaySolutionsGateway
from printshop.adapters.security.bcrypt_hasher import BcryptPasswordHasher
from printshop.adapters.security.jwt_tokens import JwtTokenService
from printshop.adapters.storage.local import LocalObjectStorage
from printshop.application.ports import ObjectStorage, PasswordHasher, PaymentGateway, TokenService
from printshop.application.use_cases.auth import AuthService
from printshop.application.use_cases.carts import CartService
from printshop.application.use_cases.categories import CategoryService
from printshop.application.use_cases.files import FileService
from printshop.application.use_cases.orders import OrderService
from printshop.application.use_cases.payments import PaymentService
from printshop.application.use_cases.products import ProductService
from printshop.application.use_cases.users import UserService
from printshop.config import Settings


class Container:
    """Long-lived adapters plus factories for per-request services.

    Every service gets its own unit of work, so nothing transactional is
    shared between requests.
    """

    def __init__(
        self,
        settings: Settings,
        session_factory: sessionmaker,
        hasher: PasswordHasher,
        tokens: TokenService,
        storage: ObjectStorage,
        gateway: PaymentGateway,
    ):
        self.settings = settings
        self.session_factory = session_factory
        self.hasher = hasher
        self.tokens = tokens
        self.storage = storage
        self.gateway = gateway

    def uow(self) -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(self.session_factory)

    def auth_service(self) -> AuthService:
        return AuthService(self.uow(), self.hasher, self.tokens, frozenset(self.settings.admin_emails))

    def user_service(self) -> UserService:
        return UserService(self.uow(), self.hasher)

    def category_service(self) -> CategoryService:
        return CategoryService(self.uow())

    def product_service(self) -> ProductService:
        return ProductService(self.uow(), self.storage)

    def file_service(self) -> FileService:
        return FileService(
            self.uow(),
            self.storage,
            url_ttl_seconds=self.settings.presigned_url_ttl_seconds,
            retention=timedelta(days=self.settings.unpurchased_file_retention_days),
        )

    def cart_service(self) -> CartService:
        return CartService(self.uow())

    def order_service(self) -> OrderService:
        return OrderService(self.uow())

    def payment_service(self) -> PaymentService:
        return PaymentService(self.uow(), self.gateway)


def build_container(
    settings: Settings,
    storage: ObjectStorage | None = None,
    gateway: PaymentGateway | None = None,
) -> Container:
    session_factory = create_session_factory(settings.database_url)
    create_schema(session_factory.kw["bind"])
    return Container(
        settings=settings,
        session_factory=session_factory,
        hasher=BcryptPasswordHasher(rounds=settings.bcrypt_rounds),
        tokens=JwtTokenService(
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            expires=timedelta(minutes=settings.jwt_expires_minutes),
        ),
        storage=storage or LocalObjectStorage(settings.upload_dir, settings.public_base_url, settings.jwt_secret),
        gateway=gateway or PaySolutionsGateway(
            settings.payment_gateway_url,
            settings.payment_merchant_id,
            settings.payment_merchant_secret_key,
            settings.payment_api_key,
            timeout=settings.http_timeout_seconds,
        ),
    )
