from uuid import UUID

from printshop.application.dto import (
    AddressInput,
    AddressUpdateInput,
    Page,
    PageRequest,
    UserOutput,
    UserUpdateInput,
)
from printshop.application.ports import PasswordHasher, UnitOfWork
from printshop.application.use_cases.operations import operation
from printshop.domain.access import Action, ResourceKind, authorize, authorize_collection, row_filter
from printshop.domain.errors import ForbiddenError, NotFoundError
from printshop.domain.user import Actor, Address


class UserService:
    def __init__(self, uow: UnitOfWork, hasher: PasswordHasher):
        self.uow = uow
        self.hasher = hasher

    @operation("list users")
    def list_users(self, actor: Actor, page: PageRequest) -> Page[UserOutput]:
        where = row_filter(actor, ResourceKind.USER)
        with self.uow:
            users = self.uow.users.list_page(where, page.skip, page.limit)
            total = self.uow.users.count(where)
        return Page.build([UserOutput.from_user(user) for user in users], total, page)

    @operation("find user profile")
    def get_user(self, actor: Actor, user_id: UUID) -> UserOutput:
        with self.uow:
            user = authorize(actor, ResourceKind.USER, self.uow.users.get(user_id), Action.READ,
                             not_found="User not found")
        return UserOutput.from_user(user)

    @operation("update user")
    def update_user(self, actor: Actor, user_id: UUID, input: UserUpdateInput) -> UserOutput:
        changes = input.changes()
        if "email" in changes:
            changes["email"] = changes["email"].strip().lower()

        with self.uow:
            user = authorize(actor, ResourceKind.USER, self.uow.users.get(user_id), Action.UPDATE,
                             not_found="User not found")
            if "role" in changes and not actor.is_admin:
                raise ForbiddenError("Only an administrator can change a role")
            if "password" in changes:
                changes["password_hash"] = self.hasher.hash(changes.pop("password"))
            user = user.with_changes(changes)
            self.uow.users.update(user)
            self.uow.commit()
        return UserOutput.from_user(user)

    @operation("delete user")
    def delete_user(self, actor: Actor, user_id: UUID) -> None:
        with self.uow:
            authorize(actor, ResourceKind.USER, self.uow.users.get(user_id), Action.DELETE,
                      not_found="User not found")
            self.uow.users.delete(user_id)
            self.uow.commit()

    #
    # 住所 (1ユーザー1件)
    #
    def _authorize_address(self, actor: Actor, user_id: UUID, action: Action) -> None:
        # ユーザーの存在確認 -> 所有者チェックの順
        if self.uow.users.get(user_id) is None:
            raise NotFoundError("User not found")
        authorize_collection(actor, ResourceKind.ADDRESS, action, owner_id=user_id)

    @operation("insert address")
    def create_address(self, actor: Actor, input: AddressInput) -> Address:
        with self.uow:
            self._authorize_address(actor, actor.id, Action.CREATE)
            address = Address(user_id=actor.id, **input.model_dump())
            self.uow.addresses.add(address)
            self.uow.commit()
        return address

    @operation("find address")
    def get_address(self, actor: Actor, user_id: UUID) -> Address:
        with self.uow:
            self._authorize_address(actor, user_id, Action.READ)
            address = self.uow.addresses.get_by_user_id(user_id)
        if address is None:
            raise NotFoundError("Address not found for this user")
        return address

    @operation("update address")
    def update_address(self, actor: Actor, user_id: UUID, input: AddressUpdateInput) -> Address:
        with self.uow:
            self._authorize_address(actor, user_id, Action.UPDATE)
            address = self.uow.addresses.get_by_user_id(user_id)
            if address is None:
                raise NotFoundError(_missing_address(actor, user_id))
            address = address.with_changes(input.changes())
            self.uow.addresses.update(address)
            self.uow.commit()
        return address

    @operation("delete address")
    def delete_address(self, actor: Actor, user_id: UUID) -> None:
        with self.uow:
            self._authorize_address(actor, user_id, Action.DELETE)
            if self.uow.addresses.get_by_user_id(user_id) is None:
                raise NotFoundError(_missing_address(actor, user_id))
            self.uow.addresses.delete_by_user_id(user_id)
            self.uow.commit()


def _missing_address(actor: Actor, user_id: UUID) -> str:
    if actor.id == user_id:
        return "You have never added your address before. Please add an address first."
    return "Address not found for this user"
