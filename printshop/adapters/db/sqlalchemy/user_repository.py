from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from printshop.adapters.db.sqlalchemy import models
from printshop.adapters.db.sqlalchemy.filters import paged, scoped
from printshop.application.ports import AddressRepository, UserRepository
from printshop.domain.access import RowFilter
from printshop.domain.errors import ConflictError
from printshop.domain.user import Address, Role, User


def _to_user(user_model: models.User) -> User:
    return User(
        id=UUID(user_model.id),
        first_name=user_model.first_name,
        last_name=user_model.last_name,
        email=user_model.email,
        password_hash=user_model.password_hash,
        phone=user_model.phone,
        role=Role(user_model.role),
        created_at=models.aware(user_model.created_at),
        updated_at=models.aware(user_model.updated_at),
    )


class SQLAlchemyUserRepository(UserRepository):
    def __init__(self, session: Session):
        self.session = session

    def _write(self, user_model: models.User, user: User) -> None:
        user_model.first_name = user.first_name
        user_model.last_name = user.last_name
        user_model.email = user.email
        user_model.password_hash = user.password_hash
        user_model.phone = user.phone
        user_model.role = user.role.value
        user_model.created_at = user.created_at
        user_model.updated_at = user.updated_at
        try:
            self.session.flush()
        except IntegrityError as e:
            raise ConflictError(f"Email {user.email} is already in use.") from e

    def add(self, user: User) -> None:
        user_model = models.User(id=str(user.id))
        self.session.add(user_model)
        self._write(user_model, user)

    def get(self, user_id: UUID) -> User | None:
        user_model = self.session.get(models.User, str(user_id))
        if user_model:
            return _to_user(user_model)
        return None

    def get_by_email(self, email: str) -> User | None:
        user_model = self.session.query(models.User).filter_by(email=email.strip().lower()).first()
        if user_model:
            return _to_user(user_model)
        return None

    def list_page(self, where: RowFilter, skip: int, take: int) -> list[User]:
        query = scoped(self.session.query(models.User), models.User.id, where)
        user_models = paged(query, (models.User.created_at, models.User.id), skip, take).all()
        return [_to_user(user_model) for user_model in user_models]

    def count(self, where: RowFilter) -> int:
        return scoped(self.session.query(models.User), models.User.id, where).count()

    def update(self, user: User) -> None:
        user_model = self.session.get(models.User, str(user.id))
        self._write(user_model, user)

    def delete(self, user_id: UUID) -> None:
        self.session.query(models.User).filter_by(id=str(user_id)).delete()


def _to_address(address_model: models.Address) -> Address:
    return Address(
        id=UUID(address_model.id),
        user_id=UUID(address_model.user_id),
        receiver_name=address_model.receiver_name,
        address=address_model.address,
        phone=address_model.phone,
        sub_district=address_model.sub_district,
        district=address_model.district,
        province=address_model.province,
        country=address_model.country,
        postal_code=address_model.postal_code,
        tax_payer_id=address_model.tax_payer_id,
        tax_payer_name=address_model.tax_payer_name,
        created_at=models.aware(address_model.created_at),
        updated_at=models.aware(address_model.updated_at),
    )


_ADDRESS_FIELDS = (
    "receiver_name", "address", "phone", "sub_district", "district", "province",
    "country", "postal_code", "tax_payer_id", "tax_payer_name", "created_at", "updated_at",
)


class SQLAlchemyAddressRepository(AddressRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, address: Address) -> None:
        address_model = models.Address(id=str(address.id), user_id=str(address.user_id))
        for field in _ADDRESS_FIELDS:
            setattr(address_model, field, getattr(address, field))
        self.session.add(address_model)
        try:
            self.session.flush()
        except IntegrityError as e:
            raise ConflictError("This user already has an address.") from e

    def get_by_user_id(self, user_id: UUID) -> Address | None:
        address_model = self.session.query(models.Address).filter_by(user_id=str(user_id)).first()
        if address_model:
            return _to_address(address_model)
        return None

    def update(self, address: Address) -> None:
        address_model = self.session.get(models.Address, str(address.id))
        for field in _ADDRESS_FIELDS:
            setattr(address_model, field, getattr(address, field))

    def delete_by_user_id(self, user_id: UUID) -> None:
        self.session.query(models.Address).filter_by(user_id=str(user_id)).delete()
