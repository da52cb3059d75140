from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from sqlalchemy import select, func, delete, update, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ebook_catalog.models.ebook import Ebook, WRITABLE_FIELDS
from ebook_catalog.domain.catalog.errors import UpstreamError, ValidationError

@dataclass(frozen=True)
class EbookFilter:
    text: Optional[str] = None
    language: Optional[str] = None
    category: Optional[str] = None

    @classmethod
    def from_params(cls, text=None, language=None, category=None) -> "EbookFilter":
        def clean(v):
            v = (v or "").strip()
            return v or None
        return cls(text=clean(text), language=clean(language), category=clean(category))

def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")

def _contains(column, needle: str, casefold: bool):
    if casefold:
        # ambos lados pasan por casefold(): ver install_sqlite_functions
        pattern = f"%{_escape_like(needle.casefold())}%"
        return func.casefold(column).like(pattern, escape="\\")
    return column.ilike(f"%{_escape_like(needle)}%", escape="\\")

def build_predicates(flt: EbookFilter, casefold: bool = True) -> list:
    """Traduce el filtro a expresiones SQLAlchemy parametrizadas.

    ``casefold`` solo vale en sqlite; otros motores usan ILIKE.
    """
    preds = []
    if flt.text:
        preds.append(or_(
            _contains(Ebook.title, flt.text, casefold),
            _contains(Ebook.author, flt.text, casefold),
            _contains(Ebook.description, flt.text, casefold),
            _contains(Ebook.categories, flt.text, casefold),
        ))
    if flt.language:
        preds.append(Ebook.language == flt.language)
    if flt.category:
        preds.append(_contains(Ebook.categories, flt.category, casefold))
    return preds

class CatalogRepository:
    """Acceso a la tabla ``ebooks``. Los errores de DB salen como ``UpstreamError``."""

    def __init__(self, db: Session):
        self.db = db

    def _fail(self, op: str, e: Exception):
        self.db.rollback()
        raise UpstreamError(f"Error de base de datos en {op}: {e.__class__.__name__}") from e

    def insert(self, record: dict[str, Any]) -> int:
        row = Ebook(**{k: v for k, v in record.items() if k in WRITABLE_FIELDS})
        try:
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
        except SQLAlchemyError as e:
            self._fail("insert", e)
        return row.id

    def get_by_id(self, ebook_id: int) -> Optional[Ebook]:
        try:
            return self.db.get(Ebook, ebook_id)
        except SQLAlchemyError as e:
            self._fail("get_by_id", e)

    def update_by_id(self, ebook_id: int, fields: dict[str, Any]) -> int:
        unknown = set(fields) - set(WRITABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Campos no editables: {', '.join(sorted(unknown))}")
        if not fields:
            return 0
        try:
            res = self.db.execute(
                update(Ebook).where(Ebook.id == ebook_id).values(**fields)
                .execution_options(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self._fail("update_by_id", e)
        self.db.expire_all()
        return res.rowcount or 0

    def delete_by_id(self, ebook_id: int) -> int:
        try:
            res = self.db.execute(
                delete(Ebook).where(Ebook.id == ebook_id)
                .execution_options(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self._fail("delete_by_id", e)
        self.db.expire_all()
        return res.rowcount or 0

    def _predicates(self, flt: EbookFilter) -> list:
        return build_predicates(flt, casefold=self.db.get_bind().dialect.name == "sqlite")

    def count(self, flt: EbookFilter) -> int:
        try:
            total = self.db.execute(
                select(func.count(Ebook.id)).where(*self._predicates(flt))
            ).scalar_one()
        except SQLAlchemyError as e:
            self._fail("count", e)
        return int(total or 0)

    def fetch(self, flt: EbookFilter, offset: int, limit: int) -> List[Ebook]:
        try:
            rows = self.db.execute(
                select(Ebook).where(*self._predicates(flt))
                .order_by(Ebook.created_at.desc(), Ebook.id.desc())
                .offset(offset).limit(limit)
            ).scalars().all()
        except SQLAlchemyError as e:
            self._fail("fetch", e)
        return list(rows)

    def query_page(self, flt: EbookFilter, offset: int, limit: int) -> Tuple[List[Ebook], int]:
        # mismo predicado para el total y para la página
        return self.fetch(flt, offset, limit), self.count(flt)
