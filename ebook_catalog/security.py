import os
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt
from passlib.context import CryptContext
from dotenv import load_dotenv

load_dotenv()

ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@example.com")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")
# Si está definido (pbkdf2_sha256), tiene prioridad sobre ADMIN_PASSWORD
ADMIN_PASSWORD_HASH = os.getenv("ADMIN_PASSWORD_HASH") or None

SESSION_SECRET = os.getenv("SESSION_SECRET", "change_me_secret")
SESSION_COOKIE = "session"
ALGORITHM = "HS256"
SESSION_MAX_AGE_MINUTES = int(os.getenv("SESSION_MAX_AGE_MINUTES", "480"))

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

@dataclass(frozen=True)
class AuthContext:
    """Identidad de la request; la construye ``deps.get_auth_context``."""
    is_admin: bool = False
    email: str | None = None

ANONYMOUS = AuthContext()

def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)

def check_admin_credentials(email: str, password: str,
                            admin_email: str | None = None,
                            admin_password: str | None = None,
                            admin_password_hash: str | None = None) -> bool:
    admin_email = admin_email if admin_email is not None else ADMIN_EMAIL
    admin_password = admin_password if admin_password is not None else ADMIN_PASSWORD
    admin_password_hash = admin_password_hash if admin_password_hash is not None else ADMIN_PASSWORD_HASH

    if not secrets.compare_digest(email.encode(), admin_email.encode()):
        return False
    if admin_password_hash:
        return pwd_context.verify(password, admin_password_hash)
    return secrets.compare_digest(password.encode(), admin_password.encode())

def create_session_token(email: str, expires_delta: timedelta | None = None) -> str:
    expires_delta = expires_delta or timedelta(minutes=SESSION_MAX_AGE_MINUTES)
    expire = datetime.now(tz=timezone.utc) + expires_delta
    to_encode = {"sub": email, "adm": True, "exp": expire}
    return jwt.encode(to_encode, SESSION_SECRET, algorithm=ALGORITHM)

def decode_session_token(token: str | None) -> AuthContext:
    if not token:
        return ANONYMOUS
    try:
        payload = jwt.decode(token, SESSION_SECRET, algorithms=[ALGORITHM])
    except JWTError:
        return ANONYMOUS
    email = payload.get("sub")
    if not email or not payload.get("adm"):
        return ANONYMOUS
    return AuthContext(is_admin=True, email=email)
