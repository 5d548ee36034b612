from datetime import datetime, timezone
from uuid import UUID, uuid4
import enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Role(str, enum.Enum):
    ADMIN = "ADMIN"
    USER = "USER"

#
# 値オブジェクト
#
class Actor(BaseModel):
    """The authenticated caller, passed explicitly into every use case."""
    id: UUID
    role: Role
    email: str = ""
    model_config = ConfigDict(frozen=True)

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

#
# エンティティ
#
class User(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    first_name: str
    last_name: str
    email: str
    password_hash: str
    phone: str
    role: Role = Role.USER
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        if "@" not in v:
            raise ValueError("Invalid email address")
        return v.strip().lower()

    def as_actor(self) -> Actor:
        return Actor(id=self.id, role=self.role, email=self.email)

    def with_changes(self, changes: dict) -> "User":
        return self.model_copy(update={**changes, "updated_at": utcnow()})


class Address(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    user_id: UUID
    receiver_name: str
    address: str
    phone: str
    sub_district: str | None = None
    district: str | None = None
    province: str | None = None
    country: str
    postal_code: str
    tax_payer_id: str | None = None
    tax_payer_name: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def with_changes(self, changes: dict) -> "Address":
        return self.model_copy(update={**changes, "updated_at": utcnow()})
