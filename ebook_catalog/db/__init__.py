import os
from sqlalchemy import create_engine, event, MetaData
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base, Session
from dotenv import load_dotenv
from typing import Generator

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./data.sqlite")
# Naming convention para que Alembic genere nombres estables y limpios
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

def _casefold(value):
    return value.casefold() if isinstance(value, str) else value

def install_sqlite_functions(eng: Engine) -> Engine:
    """Registra ``casefold()`` en cada conexión sqlite.

    El ``lower()`` nativo de sqlite solo conoce ASCII: "ÉMILE" no pasaría a
    "émile" y la búsqueda del catálogo fallaría con títulos en francés.
    """
    if eng.dialect.name != "sqlite":
        return eng

    @event.listens_for(eng, "connect")
    def _on_connect(dbapi_conn, _record):
        dbapi_conn.create_function("casefold", 1, _casefold, deterministic=True)

    return eng

# sqlite: la sesión se usa desde el threadpool de FastAPI
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = install_sqlite_functions(
    create_engine(DATABASE_URL, pool_pre_ping=True, connect_args=connect_args)
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base(metadata=MetaData(naming_convention=NAMING_CONVENTION))

def get_db() -> Generator[Session, None, None]:
    """Dependency de FastAPI para obtener y cerrar la sesión de DB por request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

__all__ = ["Base", "engine", "SessionLocal", "get_db", "install_sqlite_functions"]
