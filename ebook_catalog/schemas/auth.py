from pydantic import BaseModel, EmailStr
from typing import Optional

class LoginIn(BaseModel):
    email: EmailStr
    password: str

class MeOut(BaseModel):
    isAdmin: bool
    email: Optional[str] = None

class SimpleOk(BaseModel):
    ok: bool = True
