"""Access control and ownership policy.

Every use case resolves the target record first, then asks :func:`can_access`
whether the actor may perform the action on it, and only then mutates state.
The evaluator is a pure function: it never touches the store.

Rules, first match wins:

1. no actor -> UNAUTHORIZED
2. ADMIN -> allow
3. resource kind without an owner (categories) -> reads for anyone,
   everything else denied
4. collection-level request on an owned kind (no owner id) -> create/list
   allowed, listing is narrowed by :func:`row_filter`
5. owned resource -> allow only the owner
"""
from typing import Any, TypeVar
from uuid import UUID
import enum

from pydantic import BaseModel, ConfigDict

from printshop.domain.errors import (
    ConflictError,
    DomainError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
)
from printshop.domain.user import Actor, Role

T = TypeVar("T")


class Action(str, enum.Enum):
    READ = "read"
    LIST = "list"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


READ_ACTIONS = frozenset({Action.READ, Action.LIST})
COLLECTION_ACTIONS = frozenset({Action.CREATE, Action.LIST})


class ResourceKind(str, enum.Enum):
    USER = "user"
    ADDRESS = "address"
    PRODUCT = "product"
    CATEGORY = "category"
    FILE = "file"
    ORDER = "order"
    CART = "cart"

    @property
    def owned(self) -> bool:
        return self is not ResourceKind.CATEGORY


class Resource(BaseModel):
    kind: ResourceKind
    owner_id: UUID | None = None
    model_config = ConfigDict(frozen=True)


class DenialKind(str, enum.Enum):
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"


_ERRORS: dict[DenialKind, type[DomainError]] = {
    DenialKind.UNAUTHORIZED: UnauthorizedError,
    DenialKind.FORBIDDEN: ForbiddenError,
    DenialKind.NOT_FOUND: NotFoundError,
    DenialKind.CONFLICT: ConflictError,
}


class Denial(BaseModel):
    kind: DenialKind
    reason: str
    model_config = ConfigDict(frozen=True)

    def to_error(self) -> DomainError:
        return _ERRORS[self.kind](self.reason)


class Decision(BaseModel):
    denial: Denial | None = None
    model_config = ConfigDict(frozen=True)

    @property
    def allowed(self) -> bool:
        return self.denial is None

    def raise_for_denial(self) -> None:
        if self.denial is not None:
            raise self.denial.to_error()


ALLOW = Decision()


def deny(kind: DenialKind, reason: str) -> Decision:
    return Decision(denial=Denial(kind=kind, reason=reason))


def can_access(actor: Actor | None, resource: Resource, action: Action) -> Decision:
    if actor is None:
        return deny(DenialKind.UNAUTHORIZED, "Authentication is required")

    if actor.role is Role.ADMIN:
        return ALLOW

    if not resource.kind.owned:
        if action in READ_ACTIONS:
            return ALLOW
        return deny(
            DenialKind.FORBIDDEN,
            f"You are not authorized to {action.value} this {resource.kind.value}",
        )

    if resource.owner_id is None:
        if action in COLLECTION_ACTIONS:
            return ALLOW
        return deny(
            DenialKind.FORBIDDEN,
            f"You are not authorized to {action.value} this {resource.kind.value}",
        )

    if resource.owner_id == actor.id:
        return ALLOW
    return deny(
        DenialKind.FORBIDDEN,
        f"You are not authorized to access this {resource.kind.value}",
    )


def owner_id_of(kind: ResourceKind, record: Any) -> UUID | None:
    if not kind.owned:
        return None
    if kind is ResourceKind.USER:
        return record.id
    return record.user_id


def authorize(
    actor: Actor | None,
    kind: ResourceKind,
    record: T | None,
    action: Action,
    *,
    not_found: str | None = None,
) -> T:
    """Existence first, then ownership.

    A missing record always reports NotFound, whoever is asking.
    """
    if record is None:
        deny(DenialKind.NOT_FOUND, not_found or f"{kind.value.capitalize()} not found").raise_for_denial()
    can_access(actor, Resource(kind=kind, owner_id=owner_id_of(kind, record)), action).raise_for_denial()
    return record


def authorize_collection(
    actor: Actor | None,
    kind: ResourceKind,
    action: Action,
    owner_id: UUID | None = None,
) -> None:
    can_access(actor, Resource(kind=kind, owner_id=owner_id), action).raise_for_denial()


def check_not_purchased(record: Any, kind: ResourceKind, action: Action) -> Decision:
    """Purchased products and files are locked for every role."""
    if getattr(record, "is_purchased", False):
        return deny(
            DenialKind.CONFLICT,
            f"{kind.value.capitalize()} is already purchased, cannot {action.value}",
        )
    return ALLOW


def ensure_not_purchased(record: T, kind: ResourceKind, action: Action) -> T:
    check_not_purchased(record, kind, action).raise_for_denial()
    return record


#
# 一覧取得の行フィルタ
#
class RowFilter(BaseModel):
    """Query-shaping predicate: ``owner_id`` None means every row is visible."""
    owner_id: UUID | None = None
    model_config = ConfigDict(frozen=True)

    def permits(self, owner_id: UUID | None) -> bool:
        return self.owner_id is None or self.owner_id == owner_id


def row_filter(actor: Actor | None, kind: ResourceKind) -> RowFilter:
    authorize_collection(actor, kind, Action.LIST)
    if actor.is_admin or not kind.owned:
        return RowFilter()
    return RowFilter(owner_id=actor.id)
