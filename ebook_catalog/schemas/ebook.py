from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime

class EbookOut(BaseModel):
    id: int
    title: str
    author: str
    description: str = ""
    language: str = "fr"
    price_cents: int = 0
    categories: str = ""
    cover_path: Optional[str] = None
    pdf_path: str
    created_at: datetime
    # IMPORTANTE para devolver ORM:
    model_config = ConfigDict(from_attributes=True)

class CatalogPage(BaseModel):
    """Envelope del listado público: items + metadatos de paginación.

    ``pages``, ``hasPrev`` y ``hasNext`` siempre se derivan de
    ``total``, ``page`` y ``pageSize`` (ver ``CatalogPage.build``).
    """

    items: List[EbookOut] = Field(default_factory=list)
    total: int
    page: int
    pageSize: int
    pages: int
    hasPrev: bool
    hasNext: bool

    @classmethod
    def build(cls, items, total: int, page: int, page_size: int, pages: int) -> "CatalogPage":
        return cls(
            items=[EbookOut.model_validate(i) for i in items],
            total=total,
            page=page,
            pageSize=page_size,
            pages=pages,
            hasPrev=page > 1,
            hasNext=page < pages,
        )

    @classmethod
    def empty(cls, page_size: int) -> "CatalogPage":
        return cls.build([], total=0, page=1, page_size=page_size, pages=1)

class CreatedOut(BaseModel):
    ok: bool = True
    id: int

class UpdatedOut(BaseModel):
    ok: bool = True
    updated: int

class DeletedOut(BaseModel):
    ok: bool = True
    deleted: int

class ErrorOut(BaseModel):
    ok: bool = False
    error: str
    detail: Optional[str] = None
