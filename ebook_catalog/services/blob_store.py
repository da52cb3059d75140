import logging
import re
import time
import uuid
from pathlib import Path
from typing import Protocol

from ebook_catalog.core.settings_static import UPLOADS_URL_PREFIX
from ebook_catalog.domain.catalog.errors import UpstreamError

log = logging.getLogger("blob_store")

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")

def sanitize_filename(name: str | None) -> str:
    """Deja solo [A-Za-z0-9._-]; el resto pasa a '_'."""
    base = (name or "").replace("\\", "/").rsplit("/", 1)[-1]
    safe = _UNSAFE_CHARS.sub("_", base).lstrip(".")
    return safe or "file"

def make_blob_key(namespace: str, filename: str | None,
                  now_ms: int | None = None, token: str | None = None) -> str:
    """``pdfs/1718000000000-3f9a1c2e-mi_libro.pdf``: timestamp en ms + token + nombre saneado."""
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    token = token or uuid.uuid4().hex[:8]
    return f"{namespace}/{stamp}-{token}-{sanitize_filename(filename)}"

class BlobStore(Protocol):
    def store(self, content: bytes, mime_type: str | None, key: str) -> str: ...
    def remove(self, reference: str | None) -> None: ...

class LocalBlobStore:
    """Blobs en disco, servidos por el mount estático ``/uploads``."""

    def __init__(self, root: Path, url_prefix: str = UPLOADS_URL_PREFIX):
        self.root = Path(root).resolve()
        self.url_prefix = url_prefix.rstrip("/")

    def _path_for_key(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if self.root not in path.parents:
            raise UpstreamError(f"Clave fuera del almacén: {key}")
        return path

    def _path_for_reference(self, reference: str) -> Path | None:
        prefix = self.url_prefix + "/"
        if not reference.startswith(prefix):
            return None
        try:
            return self._path_for_key(reference[len(prefix):])
        except UpstreamError:
            return None

    def store(self, content: bytes, mime_type: str | None, key: str) -> str:
        path = self._path_for_key(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            # "xb": solo creación, nunca sobreescribe una clave existente
            with open(path, "xb") as buffer:
                buffer.write(content)
        except FileExistsError:
            raise UpstreamError(f"La clave ya existe: {key}")
        except OSError as e:
            raise UpstreamError(f"Fallo al guardar {key}: {e}")
        log.debug("blob stored %s (%s, %d bytes)", key, mime_type, len(content))
        return f"{self.url_prefix}/{key}"

    def remove(self, reference: str | None) -> None:
        if not reference:
            return
        path = self._path_for_reference(reference)
        if path is None:
            log.warning("foreign blob reference ignored: %s", reference)
            return
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise UpstreamError(f"Fallo al borrar {reference}: {e}")
