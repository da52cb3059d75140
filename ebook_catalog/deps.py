from fastapi import Depends, Request
from sqlalchemy.orm import Session
from ebook_catalog.db import get_db
from ebook_catalog.core.settings_static import UPLOADS_DIR, ensure_upload_dirs
from ebook_catalog.domain.catalog.errors import Unauthorized
from ebook_catalog.domain.catalog.repository import CatalogRepository
from ebook_catalog.domain.catalog.service import AdminMutationService
from ebook_catalog.security import AuthContext, SESSION_COOKIE, decode_session_token
from ebook_catalog.services.blob_store import BlobStore, LocalBlobStore

def get_blob_store() -> BlobStore:
    return LocalBlobStore(ensure_upload_dirs(UPLOADS_DIR))

def get_auth_context(request: Request) -> AuthContext:
    return decode_session_token(request.cookies.get(SESSION_COOKIE))

def require_admin(auth: AuthContext = Depends(get_auth_context)) -> AuthContext:
    # corre antes de validar el cuerpo multipart
    if not auth.is_admin:
        raise Unauthorized("Sesión de administrador requerida")
    return auth

def get_repository(db: Session = Depends(get_db)) -> CatalogRepository:
    return CatalogRepository(db)

def get_admin_service(repo: CatalogRepository = Depends(get_repository),
                      blobs: BlobStore = Depends(get_blob_store)) -> AdminMutationService:
    return AdminMutationService(repo, blobs)
