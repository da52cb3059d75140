import logging
import os
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from dotenv import load_dotenv

from ebook_catalog.db import Base, engine
from ebook_catalog.models import ebook  # noqa: F401  registra la tabla en Base.metadata
from ebook_catalog.core.settings_static import UPLOADS_DIR, UPLOADS_URL_PREFIX, ensure_upload_dirs
from ebook_catalog.domain.catalog.errors import CatalogError, UpstreamError, ValidationError

from ebook_catalog.routers import auth as auth_router
from ebook_catalog.routers import ebooks as ebooks_router

load_dotenv()

log = logging.getLogger("catalog.api")

if os.getenv("DEV_AUTO_CREATE", "1") == "1":
    Base.metadata.create_all(bind=engine)

app = FastAPI(title="Ebook Catalog API")

# ==== Directorio de uploads (covers/, pdfs/) ====
ensure_upload_dirs(UPLOADS_DIR)
app.mount(UPLOADS_URL_PREFIX, StaticFiles(directory=str(UPLOADS_DIR)), name="uploads")

# ==== CORS ====
origins = os.getenv("CORS_ORIGINS", "")
origins_list = [o.strip() for o in origins.split(",")] if origins else ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins_list,
    allow_credentials="*" not in origins_list,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ==== Errores de dominio -> {ok:false, error:<tag>} ====
@app.exception_handler(CatalogError)
def catalog_error_handler(request: Request, exc: CatalogError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"ok": False, "error": exc.tag, "detail": exc.detail},
    )

@app.exception_handler(RequestValidationError)
def request_validation_handler(request: Request, exc: RequestValidationError):
    detail = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}"
        for err in exc.errors()
    )
    return JSONResponse(
        status_code=ValidationError.status_code,
        content={"ok": False, "error": ValidationError.tag, "detail": detail},
    )

@app.exception_handler(Exception)
def unexpected_error_handler(request: Request, exc: Exception):
    log.exception("unhandled error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=UpstreamError.status_code,
        content={"ok": False, "error": UpstreamError.tag, "detail": "Error interno"},
    )

# ==== Routers ====
app.include_router(auth_router.router)
app.include_router(ebooks_router.router)

@app.get("/health")
def health():
    return {"status": "ok"}
