from typing import Generic, TypeVar

from pydantic import BaseModel

from printshop.application.dto import Page

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    success: bool = True
    message: str | None = None
    data: T | None = None


class PageEnvelope(BaseModel, Generic[T]):
    success: bool = True
    data: list[T]
    total: int
    page: int
    total_pages: int

    @classmethod
    def of(cls, page: Page[T]) -> "PageEnvelope[T]":
        return cls(data=page.items, total=page.total, page=page.page, total_pages=page.total_pages)


def ok(data=None, message: str | None = None) -> Envelope:
    return Envelope(data=data, message=message)
