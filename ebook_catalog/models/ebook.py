from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Text, DateTime, Index, CheckConstraint
from ebook_catalog.db import Base

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)

class Ebook(Base):
    __tablename__ = "ebooks"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    author = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    language = Column(String(32), nullable=False, default="fr")
    price_cents = Column(Integer, nullable=False, default=0)
    categories = Column(Text, nullable=False, default="")   # "fiction,classic"
    cover_path = Column(String(512), nullable=True)
    pdf_path = Column(String(512), nullable=False)
    # lo fija la app al insertar: orden estable aunque la DB no tenga reloj fino
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    __table_args__ = (
        CheckConstraint("price_cents >= 0", name="price_cents_non_negative"),
        Index("ix_ebooks_created_at_id", "created_at", "id"),
        {"sqlite_autoincrement": True},  # ids nunca reutilizados
    )

# Columnas que el admin puede escribir; id y created_at son inmutables
WRITABLE_FIELDS = (
    "title", "author", "description", "language",
    "price_cents", "categories", "cover_path", "pdf_path",
)
