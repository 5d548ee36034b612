import logging
from datetime import datetime, timedelta
from uuid import UUID

from printshop.application.dto import FileOutput, FileUpdateInput, SweepResult, Upload
from printshop.application.ports import ObjectStorage, UnitOfWork
from printshop.application.use_cases.operations import operation
from printshop.domain.access import Action, ResourceKind, authorize, ensure_not_purchased
from printshop.domain.errors import BadRequestError, ForbiddenError, NotFoundError
from printshop.domain.file import StoredFile
from printshop.domain.user import Actor, utcnow

logger = logging.getLogger(__name__)


def discard_objects(storage: ObjectStorage, keys: list[str]) -> None:
    """Delete stored objects whose rows are already committed as gone.

    A failure leaves an orphaned object behind; it is logged and skipped.
    """
    for key in keys:
        try:
            storage.delete(key)
        except Exception:
            logger.exception("Failed to delete stored object %s", key)


class FileService:
    def __init__(
        self,
        uow: UnitOfWork,
        storage: ObjectStorage,
        url_ttl_seconds: int = 3600,
        retention: timedelta = timedelta(days=14),
    ):
        self.uow = uow
        self.storage = storage
        self.url_ttl_seconds = url_ttl_seconds
        self.retention = retention

    def _output(self, file: StoredFile) -> FileOutput:
        return FileOutput(file=file, url=self.storage.presigned_url(file.key, self.url_ttl_seconds))

    @operation("upload file")
    def upload_file(self, actor: Actor, product_id: UUID, upload: Upload) -> FileOutput:
        if not upload.data:
            raise BadRequestError("No file uploaded")

        with self.uow:
            product = authorize(actor, ResourceKind.PRODUCT, self.uow.products.get(product_id), Action.UPDATE)
            ensure_not_purchased(product, ResourceKind.PRODUCT, Action.UPDATE)

        stored = self.storage.put(upload.data, upload.content_type, upload.filename)
        file = StoredFile(
            user_id=product.user_id,
            product_id=product.id,
            category_id=product.category_id,
            key=stored.key,
            type=stored.type,
            size=stored.size,
            display_name=upload.filename,
        )
        try:
            with self.uow:
                self.uow.files.add(file)
                self.uow.commit()
        except Exception:
            # 行の書き込みに失敗したらストレージ側の実体を消して元に戻す
            logger.warning("Rolling back stored object %s after a failed insert", stored.key)
            self.storage.delete(stored.key)
            raise
        return self._output(file)

    @operation("find files of product")
    def list_files_for_product(self, actor: Actor, product_id: UUID) -> list[FileOutput]:
        with self.uow:
            authorize(actor, ResourceKind.PRODUCT, self.uow.products.get(product_id), Action.READ)
            files = self.uow.files.list_by_product(product_id)
        if not files:
            raise NotFoundError("Files not found")
        return [self._output(file) for file in files]

    @operation("find file")
    def get_file(self, actor: Actor, file_id: UUID) -> FileOutput:
        with self.uow:
            file = authorize(actor, ResourceKind.FILE, self.uow.files.get(file_id), Action.READ)
        return self._output(file)

    @operation("update file")
    def update_file(self, actor: Actor, file_id: UUID, input: FileUpdateInput) -> FileOutput:
        changes = input.changes()
        with self.uow:
            file = authorize(actor, ResourceKind.FILE, self.uow.files.get(file_id), Action.UPDATE)
            if "is_purchased" in changes and not actor.is_admin:
                raise ForbiddenError("Only an administrator can change the purchase state")
            ensure_not_purchased(file, ResourceKind.FILE, Action.UPDATE)
            file = file.with_changes(changes)
            self.uow.files.update(file)
            self.uow.commit()
        return self._output(file)

    @operation("delete file")
    def delete_file(self, actor: Actor, file_id: UUID) -> None:
        with self.uow:
            file = authorize(actor, ResourceKind.FILE, self.uow.files.get(file_id), Action.DELETE)
            ensure_not_purchased(file, ResourceKind.FILE, Action.DELETE)
            self.uow.files.delete(file_id)
            self.uow.commit()
        discard_objects(self.storage, [file.key])

    def read_signed(self, key: str, token: str) -> tuple[bytes, str]:
        return self.storage.read_signed(key, token)

    def sweep_unpurchased_files(self, now: datetime | None = None) -> SweepResult:
        """Delete unpurchased files older than the retention period.

        Each file is removed object first, then row, in its own transaction.
        A failure is logged and the sweep moves on to the next file.
        """
        now = now or utcnow()
        cutoff = now - self.retention
        with self.uow:
            candidates = [
                file for file in self.uow.files.list_unpurchased_before(cutoff)
                if file.is_expired(now, self.retention)
            ]
        logger.info("Sweeping %d unpurchased file(s) created before %s", len(candidates), cutoff.isoformat())

        result = SweepResult()
        for file in candidates:
            try:
                self.storage.delete(file.key)
                with self.uow:
                    self.uow.files.delete(file.id)
                    self.uow.commit()
            except Exception:
                logger.exception("Failed to sweep file %s (key=%s)", file.id, file.key)
                result.failed += 1
                continue
            logger.info("Deleted expired file %s (key=%s)", file.id, file.key)
            result.deleted += 1
        return result
