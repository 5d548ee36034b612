from uuid import UUID

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from fastapi.responses import Response

from printshop.application.dto import FileUpdateInput, Upload
from printshop.application.http.fastapi.deps import get_current_actor, get_file_service
from printshop.application.http.fastapi.schemas import Envelope, ok
from printshop.application.use_cases.files import FileService
from printshop.domain.user import Actor

router = APIRouter(prefix="/api/v1/files", tags=["files"])


@router.post("/product/{product_id}", status_code=status.HTTP_201_CREATED, response_model=Envelope)
def upload_file(
    product_id: UUID,
    file: UploadFile = File(...),
    actor: Actor = Depends(get_current_actor),
    files: FileService = Depends(get_file_service),
):
    upload = Upload(
        filename=file.filename or "upload",
        content_type=file.content_type or "application/octet-stream",
        data=file.file.read(),
    )
    return ok(files.upload_file(actor, product_id, upload), "File uploaded successfully")


@router.get("/product/{product_id}", response_model=Envelope)
def list_files_for_product(
    product_id: UUID,
    actor: Actor = Depends(get_current_actor),
    files: FileService = Depends(get_file_service),
):
    return ok(files.list_files_for_product(actor, product_id))


# 署名付きURLの実体。トークン自体が認可なのでログインは不要
@router.get("/raw/{key}")
def read_raw(key: str, token: str = Query(...), files: FileService = Depends(get_file_service)):
    data, content_type = files.read_signed(key, token)
    return Response(content=data, media_type=content_type)


@router.get("/{file_id}", response_model=Envelope)
def get_file(
    file_id: UUID,
    actor: Actor = Depends(get_current_actor),
    files: FileService = Depends(get_file_service),
):
    return ok(files.get_file(actor, file_id))


@router.put("/{file_id}", response_model=Envelope)
def update_file(
    file_id: UUID,
    data: FileUpdateInput,
    actor: Actor = Depends(get_current_actor),
    files: FileService = Depends(get_file_service),
):
    return ok(files.update_file(actor, file_id, data), "File updated successfully")


@router.delete("/{file_id}", response_model=Envelope)
def delete_file(
    file_id: UUID,
    actor: Actor = Depends(get_current_actor),
    files: FileService = Depends(get_file_service),
):
    files.delete_file(actor, file_id)
    return ok(message="File deleted successfully")
