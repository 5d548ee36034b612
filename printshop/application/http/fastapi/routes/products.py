from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from pydantic import ValidationError

from printshop.application.dto import PageRequest, ProductInput, ProductUpdateInput, Upload
from printshop.application.http.fastapi.deps import get_current_actor, get_page, get_product_service
from printshop.application.http.fastapi.schemas import Envelope, PageEnvelope, ok
from printshop.application.use_cases.products import ProductService
from printshop.domain.errors import BadRequestError
from printshop.domain.user import Actor

router = APIRouter(prefix="/api/v1/products", tags=["products"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=Envelope)
def create_product(
    data: ProductInput,
    actor: Actor = Depends(get_current_actor),
    products: ProductService = Depends(get_product_service),
):
    return ok(products.create_product(actor, data), "Product created successfully")


@router.post("/with-file", status_code=status.HTTP_201_CREATED, response_model=Envelope)
def create_product_with_file(
    product: str = Form(...),
    file: UploadFile = File(...),
    actor: Actor = Depends(get_current_actor),
    products: ProductService = Depends(get_product_service),
):
    # multipart では商品情報を JSON 文字列の form フィールドで受け取る
    try:
        data = ProductInput.model_validate_json(product)
    except ValidationError as e:
        raise BadRequestError(f"Invalid product data: {e.errors()[0]['msg']}") from e
    upload = Upload(
        filename=file.filename or "upload",
        content_type=file.content_type or "application/octet-stream",
        data=file.file.read(),
    )
    return ok(products.create_product_with_file(actor, data, upload), "Product created successfully")


@router.get("", response_model=PageEnvelope)
def list_products(
    page: PageRequest = Depends(get_page),
    actor: Actor = Depends(get_current_actor),
    products: ProductService = Depends(get_product_service),
):
    return PageEnvelope.of(products.list_products(actor, page))


@router.get("/user/{user_id}", response_model=PageEnvelope)
def list_products_for_user(
    user_id: UUID,
    page: PageRequest = Depends(get_page),
    actor: Actor = Depends(get_current_actor),
    products: ProductService = Depends(get_product_service),
):
    return PageEnvelope.of(products.list_products_for_user(actor, user_id, page))


@router.get("/category/{category_id}", response_model=PageEnvelope)
def list_products_for_category(
    category_id: UUID,
    page: PageRequest = Depends(get_page),
    actor: Actor = Depends(get_current_actor),
    products: ProductService = Depends(get_product_service),
):
    return PageEnvelope.of(products.list_products(actor, page, category_id))


@router.get("/{product_id}", response_model=Envelope)
def get_product(
    product_id: UUID,
    actor: Actor = Depends(get_current_actor),
    products: ProductService = Depends(get_product_service),
):
    return ok(products.get_product(actor, product_id))


@router.put("/{product_id}", response_model=Envelope)
def update_product(
    product_id: UUID,
    data: ProductUpdateInput,
    actor: Actor = Depends(get_current_actor),
    products: ProductService = Depends(get_product_service),
):
    return ok(products.update_product(actor, product_id, data), "Product updated successfully")


@router.delete("/{product_id}", response_model=Envelope)
def delete_product(
    product_id: UUID,
    actor: Actor = Depends(get_current_actor),
    products: ProductService = Depends(get_product_service),
):
    products.delete_product(actor, product_id)
    return ok(message="Product deleted successfully")
