"""Listado público del catálogo: filtro + paginación + envelope.

Reglas de paginación:

- ``page`` < 1 pasa a 1; si supera ``pages`` se sirve la última página.
- ``pageSize`` se acota a [1, 50]; 8 si falta o no es un entero.
- ``pages = max(1, ceil(total / pageSize))``.

Si el repositorio falla se devuelve un envelope vacío pero bien formado,
junto con la excepción, para que la ruta responda con un 5xx.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

from ebook_catalog.domain.catalog.errors import UpstreamError
from ebook_catalog.domain.catalog.repository import CatalogRepository, EbookFilter
from ebook_catalog.schemas.ebook import CatalogPage

log = logging.getLogger("catalog")

DEFAULT_PAGE_SIZE = 8
MAX_PAGE_SIZE = 50
# cualquier página mayor se acota luego a la última
MAX_PAGE = 2**31 - 1

def _to_int(raw) -> Optional[int]:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        return None

@dataclass(frozen=True)
class Pagination:
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    @classmethod
    def from_params(cls, page=None, page_size=None) -> "Pagination":
        p = _to_int(page)
        ps = _to_int(page_size)
        p = min(MAX_PAGE, max(1, p)) if p is not None else 1
        if ps is None:
            ps = DEFAULT_PAGE_SIZE
        ps = min(MAX_PAGE_SIZE, max(1, ps))
        return cls(page=p, page_size=ps)

def count_pages(total: int, page_size: int) -> int:
    return max(1, math.ceil(total / page_size))

def list_ebooks(
    repo: CatalogRepository, flt: EbookFilter, pagination: Pagination
) -> Tuple[CatalogPage, Optional[UpstreamError]]:
    size = pagination.page_size
    try:
        # primero el total: el offset se calcula con la página ya acotada
        total = repo.count(flt)
        pages = count_pages(total, size)
        page = min(pagination.page, pages)
        rows = repo.fetch(flt, offset=(page - 1) * size, limit=size)
    except UpstreamError as e:
        log.warning("catalog listing degraded (%s): %s", flt, e.detail)
        return CatalogPage.empty(size), e

    return CatalogPage.build(rows, total=total, page=page, page_size=size, pages=pages), None
