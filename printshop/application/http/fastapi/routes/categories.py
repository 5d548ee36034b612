from uuid import UUID

from fastapi import APIRouter, Depends, status

from printshop.application.dto import CategoryInput, PageRequest
from printshop.application.http.fastapi.deps import get_category_service, get_current_actor, get_page
from printshop.application.http.fastapi.schemas import Envelope, PageEnvelope, ok
from printshop.application.use_cases.categories import CategoryService
from printshop.domain.user import Actor

router = APIRouter(prefix="/api/v1/categories", tags=["categories"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=Envelope)
def create_category(
    data: CategoryInput,
    actor: Actor = Depends(get_current_actor),
    categories: CategoryService = Depends(get_category_service),
):
    return ok(categories.create_category(actor, data), "Category created successfully")


@router.get("", response_model=PageEnvelope)
def list_categories(
    page: PageRequest = Depends(get_page),
    actor: Actor = Depends(get_current_actor),
    categories: CategoryService = Depends(get_category_service),
):
    return PageEnvelope.of(categories.list_categories(actor, page))


@router.get("/{category_id}", response_model=Envelope)
def get_category(
    category_id: UUID,
    actor: Actor = Depends(get_current_actor),
    categories: CategoryService = Depends(get_category_service),
):
    return ok(categories.get_category(actor, category_id))


@router.put("/{category_id}", response_model=Envelope)
def update_category(
    category_id: UUID,
    data: CategoryInput,
    actor: Actor = Depends(get_current_actor),
    categories: CategoryService = Depends(get_category_service),
):
    return ok(categories.update_category(actor, category_id, data), "Category updated successfully")


@router.delete("/{category_id}", response_model=Envelope)
def delete_category(
    category_id: UUID,
    actor: Actor = Depends(get_current_actor),
    categories: CategoryService = Depends(get_category_service),
):
    categories.delete_category(actor, category_id)
    return ok(message="Category deleted successfully")
