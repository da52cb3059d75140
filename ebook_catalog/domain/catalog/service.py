"""Altas, cambios y bajas del catálogo (solo admin).

Orden de efectos en un alta: portada -> pdf -> fila. Si falla un paso se
abortan los siguientes y no se deshacen los anteriores: una portada subida
antes de que falle el pdf queda huérfana en el almacén (limitación conocida).
En un cambio, los blobs reemplazados tampoco se borran.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Optional

from ebook_catalog.core.settings_static import COVERS_NAMESPACE, PDFS_NAMESPACE
from ebook_catalog.domain.catalog.errors import NotFound, Unauthorized, UpstreamError, ValidationError
from ebook_catalog.domain.catalog.repository import CatalogRepository
from ebook_catalog.security import AuthContext
from ebook_catalog.services.blob_store import BlobStore, make_blob_key

log = logging.getLogger("catalog.admin")

IMAGE_EXTS = (".png", ".jpg", ".jpeg", ".webp", ".gif")
# límite de INTEGER en sqlite/postgres bigint
MAX_PRICE_CENTS = 2**63 - 1

@dataclass(frozen=True)
class FilePayload:
    content: bytes
    filename: Optional[str] = None
    content_type: Optional[str] = None

    @property
    def ext(self) -> str:
        return os.path.splitext(self.filename or "")[1].lower()

def _present(f: Optional[FilePayload]) -> bool:
    return f is not None and len(f.content) > 0

def _check_pdf(f: FilePayload):
    if f.content_type != "application/pdf" and f.ext != ".pdf":
        raise ValidationError("El fichero debe ser un PDF")

def _check_cover(f: FilePayload):
    if not (f.content_type or "").startswith("image/") and f.ext not in IMAGE_EXTS:
        raise ValidationError("La portada debe ser una imagen")

def _parse_price(raw: Any) -> int:
    if isinstance(raw, bool):
        raise ValidationError("price_cents inválido")
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        raise ValidationError("price_cents inválido")
    if value < 0:
        raise ValidationError("price_cents no puede ser negativo")
    if value > MAX_PRICE_CENTS:
        raise ValidationError("price_cents demasiado grande")
    return value

def _clean(raw: Optional[str]) -> Optional[str]:
    return raw.strip() if raw is not None else None

def _require_admin(auth: AuthContext):
    if not auth.is_admin:
        raise Unauthorized("Sesión de administrador requerida")

class AdminMutationService:
    def __init__(self, repo: CatalogRepository, blobs: BlobStore):
        self.repo = repo
        self.blobs = blobs

    def _upload(self, namespace: str, f: FilePayload) -> str:
        key = make_blob_key(namespace, f.filename)
        return self.blobs.store(f.content, f.content_type, key)

    def create(
        self,
        auth: AuthContext,
        *,
        title: Optional[str],
        author: Optional[str],
        pdf: Optional[FilePayload],
        description: Optional[str] = None,
        language: Optional[str] = None,
        price_cents: Any = None,
        categories: Optional[str] = None,
        cover: Optional[FilePayload] = None,
    ) -> int:
        _require_admin(auth)

        title, author = _clean(title), _clean(author)
        if not title or not author or not _present(pdf):
            raise ValidationError("Título, autor y fichero PDF obligatorios")
        _check_pdf(pdf)
        if _present(cover):
            _check_cover(cover)
        price = _parse_price(price_cents) if price_cents not in (None, "") else 0

        cover_ref = self._upload(COVERS_NAMESPACE, cover) if _present(cover) else None
        try:
            pdf_ref = self._upload(PDFS_NAMESPACE, pdf)
        except UpstreamError:
            if cover_ref:
                log.warning("pdf upload failed, cover blob left orphaned: %s", cover_ref)
            raise

        ebook_id = self.repo.insert({
            "title": title,
            "author": author,
            "description": description or "",
            "language": _clean(language) or "fr",
            "price_cents": price,
            "categories": categories or "",
            "cover_path": cover_ref,
            "pdf_path": pdf_ref,
        })
        log.info("ebook created id=%s title=%r", ebook_id, title)
        return ebook_id

    def update(
        self,
        auth: AuthContext,
        ebook_id: int,
        *,
        title: Optional[str] = None,
        author: Optional[str] = None,
        description: Optional[str] = None,
        language: Optional[str] = None,
        price_cents: Any = None,
        categories: Optional[str] = None,
        cover: Optional[FilePayload] = None,
        pdf: Optional[FilePayload] = None,
    ) -> int:
        _require_admin(auth)

        fields: dict[str, Any] = {}
        for name, value in (("title", title), ("author", author)):
            if value is not None:
                if not value.strip():
                    raise ValidationError(f"{name} no puede estar vacío")
                fields[name] = value.strip()
        if description is not None:
            fields["description"] = description
        if language is not None:
            if not language.strip():
                raise ValidationError("language no puede estar vacío")
            fields["language"] = language.strip()
        if price_cents is not None:
            fields["price_cents"] = _parse_price(price_cents)
        if categories is not None:
            fields["categories"] = categories
        if _present(cover):
            _check_cover(cover)
        if _present(pdf):
            _check_pdf(pdf)

        if self.repo.get_by_id(ebook_id) is None:
            raise NotFound(f"Ebook {ebook_id} no encontrado")

        if _present(cover):
            fields["cover_path"] = self._upload(COVERS_NAMESPACE, cover)
        if _present(pdf):
            fields["pdf_path"] = self._upload(PDFS_NAMESPACE, pdf)

        if not fields:
            return 0
        updated = self.repo.update_by_id(ebook_id, fields)
        log.info("ebook updated id=%s fields=%s", ebook_id, sorted(fields))
        return updated

    def delete(self, auth: AuthContext, ebook_id: int) -> int:
        _require_admin(auth)

        row = self.repo.get_by_id(ebook_id)
        if row is None:
            raise NotFound(f"Ebook {ebook_id} no encontrado")

        # un blob que ya no existe no es error; remove() es idempotente
        self.blobs.remove(row.cover_path)
        self.blobs.remove(row.pdf_path)

        deleted = self.repo.delete_by_id(ebook_id)
        if not deleted:
            raise NotFound(f"Ebook {ebook_id} no encontrado")
        log.info("ebook deleted id=%s", ebook_id)
        return deleted
