import pydantic
from fastapi import APIRouter, Depends, Request, Response
from ebook_catalog.deps import get_auth_context
from ebook_catalog.domain.catalog.errors import Unauthorized
from ebook_catalog.schemas.auth import LoginIn, MeOut, SimpleOk
from ebook_catalog.security import (
    AuthContext, SESSION_COOKIE, SESSION_MAX_AGE_MINUTES,
    check_admin_credentials, create_session_token,
)

router = APIRouter(prefix="/api", tags=["auth"])

async def _read_login(request: Request) -> LoginIn:
    # el front original manda JSON; los formularios HTML mandan urlencoded
    ctype = request.headers.get("content-type", "")
    try:
        if ctype.startswith("application/json"):
            data = await request.json()
        else:
            data = dict(await request.form())
        return LoginIn.model_validate(data)
    except (ValueError, pydantic.ValidationError):
        raise Unauthorized("Identificadores incorrectos")

@router.post("/login", response_model=SimpleOk)
async def login(request: Request, response: Response):
    payload = await _read_login(request)
    if not check_admin_credentials(payload.email, payload.password):
        raise Unauthorized("Identificadores incorrectos")

    response.set_cookie(
        SESSION_COOKIE,
        create_session_token(payload.email),
        max_age=SESSION_MAX_AGE_MINUTES * 60,
        httponly=True,
        samesite="lax",
    )
    return {"ok": True}

@router.post("/logout", response_model=SimpleOk)
def logout(response: Response):
    response.delete_cookie(SESSION_COOKIE)
    return {"ok": True}

@router.get("/me", response_model=MeOut)
def me(auth: AuthContext = Depends(get_auth_context)):
    return {"isAdmin": auth.is_admin, "email": auth.email}
