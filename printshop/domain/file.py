from datetime import datetime, timedelta
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from printshop.domain.user import utcnow


class StoredFile(BaseModel):
    """An uploaded asset tied to a product; the bytes live in object storage."""
    id: UUID = Field(default_factory=uuid4)
    user_id: UUID
    product_id: UUID
    category_id: UUID | None = None
    key: str
    type: str
    size: int
    display_name: str
    is_purchased: bool = False
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def with_changes(self, changes: dict) -> "StoredFile":
        return self.model_copy(update={**changes, "updated_at": utcnow()})

    def is_expired(self, now: datetime, retention: timedelta) -> bool:
        return not self.is_purchased and self.created_at < now - retention
