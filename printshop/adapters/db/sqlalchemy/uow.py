from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from printshop.adapters.db.sqlalchemy.catalog_repository import (
    SQLAlchemyCategoryRepository,
    SQLAlchemyProductRepository,
)
from printshop.adapters.db.sqlalchemy.file_repository import SQLAlchemyFileRepository
from printshop.adapters.db.sqlalchemy.models import Base
from printshop.adapters.db.sqlalchemy.order_repository import (
    SQLAlchemyCartRepository,
    SQLAlchemyOrderRepository,
    SQLAlchemyPaymentRepository,
)
from printshop.adapters.db.sqlalchemy.user_repository import (
    SQLAlchemyAddressRepository,
    SQLAlchemyUserRepository,
)
from printshop.application.ports import (
    AddressRepository,
    CartRepository,
    CategoryRepository,
    FileRepository,
    OrderRepository,
    PaymentRepository,
    ProductRepository,
    UnitOfWork,
    UserRepository,
)


def create_session_factory(database_url: str, echo: bool = False) -> sessionmaker:
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url or database_url == "sqlite://":
            kwargs["poolclass"] = StaticPool
        engine = create_engine(database_url, echo=echo, **kwargs)

        # SQLite は外部キー制約 (ON DELETE CASCADE) を明示的に有効化する
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()
    else:
        engine = create_engine(database_url, echo=echo, pool_pre_ping=True)
    return sessionmaker(autocommit=False, autoflush=True, bind=engine)


def create_schema(engine: Engine) -> None:
    Base.metadata.create_all(engine)


# データベースの変更を伴う単一のビジネスロジック全体をラップするデザインパターン
class SQLAlchemyUnitOfWork(UnitOfWork):
    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory
        self.session: Session | None = None

    def __enter__(self) -> "SQLAlchemyUnitOfWork":
        self.session = self._session_factory()
        assert self.session is not None, "UnitOfWork is not entered."
        self.session.begin()
        self._users = SQLAlchemyUserRepository(self.session)
        self._addresses = SQLAlchemyAddressRepository(self.session)
        self._categories = SQLAlchemyCategoryRepository(self.session)
        self._products = SQLAlchemyProductRepository(self.session)
        self._files = SQLAlchemyFileRepository(self.session)
        self._carts = SQLAlchemyCartRepository(self.session)
        self._orders = SQLAlchemyOrderRepository(self.session)
        self._payments = SQLAlchemyPaymentRepository(self.session)
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        try:
            if exc_type:
                self.rollback()
        finally:
            if self.session:
                self.session.close()
            self.session = None

    def _require_session(self) -> Session:
        assert self.session is not None, "UnitOfWork is not entered."
        return self.session

    @property
    def users(self) -> UserRepository:
        self._require_session()
        return self._users

    @property
    def addresses(self) -> AddressRepository:
        self._require_session()
        return self._addresses

    @property
    def categories(self) -> CategoryRepository:
        self._require_session()
        return self._categories

    @property
    def products(self) -> ProductRepository:
        self._require_session()
        return self._products

    @property
    def files(self) -> FileRepository:
        self._require_session()
        return self._files

    @property
    def carts(self) -> CartRepository:
        self._require_session()
        return self._carts

    @property
    def orders(self) -> OrderRepository:
        self._require_session()
        return self._orders

    @property
    def payments(self) -> PaymentRepository:
        self._require_session()
        return self._payments

    def commit(self) -> None:
        self._require_session().commit()

    def rollback(self) -> None:
        self._require_session().rollback()
