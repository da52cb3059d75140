from typing import Optional
from fastapi import APIRouter, Depends, File, Form, Path, Response, UploadFile, status
from ebook_catalog.deps import get_admin_service, get_repository, require_admin
from ebook_catalog.domain.catalog.errors import NotFound
from ebook_catalog.domain.catalog.query import Pagination, list_ebooks
from ebook_catalog.domain.catalog.repository import CatalogRepository, EbookFilter
from ebook_catalog.domain.catalog.service import AdminMutationService, FilePayload
from ebook_catalog.schemas.ebook import CatalogPage, CreatedOut, DeletedOut, EbookOut, UpdatedOut
from ebook_catalog.security import AuthContext

router = APIRouter(prefix="/api/ebooks", tags=["ebooks"])

# ids fuera de INTEGER de 64 bits no llegan a la DB
EbookId = Path(..., ge=1, le=2**63 - 1)

def _payload(upload: Optional[UploadFile]) -> Optional[FilePayload]:
    if upload is None or not upload.filename:
        return None
    return FilePayload(
        content=upload.file.read(),
        filename=upload.filename,
        content_type=upload.content_type,
    )

@router.get("", response_model=CatalogPage)
def list_public(
    response: Response,
    q: Optional[str] = None,
    language: Optional[str] = None,
    lang: Optional[str] = None,        # alias usado por el front original
    category: Optional[str] = None,
    cat: Optional[str] = None,         # idem
    page: Optional[str] = None,
    pageSize: Optional[str] = None,
    page_size: Optional[str] = None,
    repo: CatalogRepository = Depends(get_repository),
):
    # page/pageSize llegan como texto: se acotan en vez de devolver 422
    flt = EbookFilter.from_params(text=q, language=language or lang, category=category or cat)
    pagination = Pagination.from_params(page=page, page_size=pageSize or page_size)
    result, error = list_ebooks(repo, flt, pagination)
    if error is not None:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return result

@router.get("/{ebook_id}", response_model=EbookOut)
def get_one(ebook_id: int = EbookId, repo: CatalogRepository = Depends(get_repository)):
    row = repo.get_by_id(ebook_id)
    if row is None:
        raise NotFound(f"Ebook {ebook_id} no encontrado")
    return row

@router.post("", response_model=CreatedOut)
def create_ebook(
    auth: AuthContext = Depends(require_admin),
    title: Optional[str] = Form(None),
    author: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    language: Optional[str] = Form(None),
    price_cents: Optional[str] = Form(None),
    categories: Optional[str] = Form(None),
    cover: Optional[UploadFile] = File(None),
    pdf: Optional[UploadFile] = File(None),
    svc: AdminMutationService = Depends(get_admin_service),
):
    ebook_id = svc.create(
        auth,
        title=title,
        author=author,
        description=description,
        language=language,
        price_cents=price_cents,
        categories=categories,
        cover=_payload(cover),
        pdf=_payload(pdf),
    )
    return {"ok": True, "id": ebook_id}

@router.put("/{ebook_id}", response_model=UpdatedOut)
def update_ebook(
    ebook_id: int = EbookId,
    auth: AuthContext = Depends(require_admin),
    title: Optional[str] = Form(None),
    author: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    language: Optional[str] = Form(None),
    price_cents: Optional[str] = Form(None),
    categories: Optional[str] = Form(None),
    cover: Optional[UploadFile] = File(None),
    pdf: Optional[UploadFile] = File(None),
    svc: AdminMutationService = Depends(get_admin_service),
):
    updated = svc.update(
        auth,
        ebook_id,
        title=title,
        author=author,
        description=description,
        language=language,
        price_cents=price_cents,
        categories=categories,
        cover=_payload(cover),
        pdf=_payload(pdf),
    )
    return {"ok": True, "updated": updated}

@router.delete("/{ebook_id}", response_model=DeletedOut)
def delete_ebook(
    ebook_id: int = EbookId,
    auth: AuthContext = Depends(require_admin),
    svc: AdminMutationService = Depends(get_admin_service),
):
    return {"ok": True, "deleted": svc.delete(auth, ebook_id)}
