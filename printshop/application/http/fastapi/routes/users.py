from uuid import UUID

from fastapi import APIRouter, Depends, status

from printshop.application.dto import AddressInput, AddressUpdateInput, PageRequest, UserUpdateInput
from printshop.application.http.fastapi.deps import get_current_actor, get_page, get_user_service
from printshop.application.http.fastapi.schemas import Envelope, PageEnvelope, ok
from printshop.application.use_cases.users import UserService
from printshop.domain.user import Actor

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("", response_model=PageEnvelope)
def list_users(
    page: PageRequest = Depends(get_page),
    actor: Actor = Depends(get_current_actor),
    users: UserService = Depends(get_user_service),
):
    return PageEnvelope.of(users.list_users(actor, page))


@router.get("/me", response_model=Envelope)
def me(actor: Actor = Depends(get_current_actor), users: UserService = Depends(get_user_service)):
    return ok(users.get_user(actor, actor.id))


#
# 住所
#
@router.post("/address", status_code=status.HTTP_201_CREATED, response_model=Envelope)
def create_address(
    data: AddressInput,
    actor: Actor = Depends(get_current_actor),
    users: UserService = Depends(get_user_service),
):
    return ok(users.create_address(actor, data), "Address created successfully")


@router.get("/{user_id}/address", response_model=Envelope)
def get_address(
    user_id: UUID,
    actor: Actor = Depends(get_current_actor),
    users: UserService = Depends(get_user_service),
):
    return ok(users.get_address(actor, user_id))


@router.put("/{user_id}/address", response_model=Envelope)
def update_address(
    user_id: UUID,
    data: AddressUpdateInput,
    actor: Actor = Depends(get_current_actor),
    users: UserService = Depends(get_user_service),
):
    return ok(users.update_address(actor, user_id, data), "Address updated successfully")


@router.delete("/{user_id}/address", response_model=Envelope)
def delete_address(
    user_id: UUID,
    actor: Actor = Depends(get_current_actor),
    users: UserService = Depends(get_user_service),
):
    users.delete_address(actor, user_id)
    return ok(message="Address deleted successfully")


#
# プロフィール
#
@router.get("/{user_id}", response_model=Envelope)
def get_user(
    user_id: UUID,
    actor: Actor = Depends(get_current_actor),
    users: UserService = Depends(get_user_service),
):
    return ok(users.get_user(actor, user_id))


@router.put("/{user_id}", response_model=Envelope)
def update_user(
    user_id: UUID,
    data: UserUpdateInput,
    actor: Actor = Depends(get_current_actor),
    users: UserService = Depends(get_user_service),
):
    return ok(users.update_user(actor, user_id, data), "User updated successfully")


@router.delete("/{user_id}", response_model=Envelope)
def delete_user(
    user_id: UUID,
    actor: Actor = Depends(get_current_actor),
    users: UserService = Depends(get_user_service),
):
    users.delete_user(actor, user_id)
    return ok(message="User deleted successfully")
