from datetime import datetime
from uuid import UUID

from sqlalchemy.orm import Session

from printshop.adapters.db.sqlalchemy import models
from printshop.application.ports import FileRepository
from printshop.domain.file import StoredFile


def _to_file(file_model: models.File) -> StoredFile:
    return StoredFile(
        id=UUID(file_model.id),
        user_id=UUID(file_model.user_id),
        product_id=UUID(file_model.product_id),
        category_id=UUID(file_model.category_id) if file_model.category_id else None,
        key=file_model.key,
        type=file_model.type,
        size=file_model.size,
        display_name=file_model.display_name,
        is_purchased=file_model.is_purchased,
        created_at=models.aware(file_model.created_at),
        updated_at=models.aware(file_model.updated_at),
    )


class SQLAlchemyFileRepository(FileRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, file: StoredFile) -> None:
        self.session.add(models.File(
            id=str(file.id),
            user_id=str(file.user_id),
            product_id=str(file.product_id),
            category_id=str(file.category_id) if file.category_id else None,
            key=file.key,
            type=file.type,
            size=file.size,
            display_name=file.display_name,
            is_purchased=file.is_purchased,
            created_at=file.created_at,
            updated_at=file.updated_at,
        ))

    def get(self, file_id: UUID) -> StoredFile | None:
        file_model = self.session.get(models.File, str(file_id))
        if file_model:
            return _to_file(file_model)
        return None

    def list_by_product(self, product_id: UUID) -> list[StoredFile]:
        file_models = (
            self.session.query(models.File)
            .filter_by(product_id=str(product_id))
            .order_by(models.File.created_at, models.File.id)
            .all()
        )
        return [_to_file(file_model) for file_model in file_models]

    def list_unpurchased_before(self, cutoff: datetime) -> list[StoredFile]:
        file_models = (
            self.session.query(models.File)
            .filter(models.File.is_purchased.is_(False), models.File.created_at < cutoff)
            .order_by(models.File.created_at)
            .all()
        )
        return [_to_file(file_model) for file_model in file_models]

    def mark_purchased(self, product_ids: list[UUID]) -> None:
        if not product_ids:
            return
        (
            self.session.query(models.File)
            .filter(models.File.product_id.in_([str(product_id) for product_id in product_ids]))
            .update({models.File.is_purchased: True}, synchronize_session=False)
        )

    def update(self, file: StoredFile) -> None:
        file_model = self.session.get(models.File, str(file.id))
        file_model.display_name = file.display_name
        file_model.is_purchased = file.is_purchased
        file_model.updated_at = file.updated_at

    def delete(self, file_id: UUID) -> None:
        self.session.query(models.File).filter_by(id=str(file_id)).delete()
