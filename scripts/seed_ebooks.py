import sys
from pathlib import Path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path: sys.path.insert(0, str(ROOT))

from sqlalchemy import select
from ebook_catalog.db import Base, SessionLocal, engine
from ebook_catalog.domain.catalog.repository import CatalogRepository
from ebook_catalog.models.ebook import Ebook

# Solo para desarrollo: pdf_path apunta a rutas de ejemplo, sin blob real
SEEDS = [
    {"title": "Le Petit Prince", "author": "Antoine de Saint-Exupéry", "language": "fr",
     "categories": "fiction,classic", "price_cents": 499, "pdf_path": "/uploads/pdfs/demo-petit-prince.pdf"},
    {"title": "Les Misérables", "author": "Victor Hugo", "language": "fr",
     "categories": "fiction,classic,roman", "price_cents": 799, "pdf_path": "/uploads/pdfs/demo-miserables.pdf"},
    {"title": "A Brief History of Time", "author": "Stephen Hawking", "language": "en",
     "categories": "nonfiction,science", "price_cents": 1299, "pdf_path": "/uploads/pdfs/demo-brief-history.pdf"},
]

def upsert(repo: CatalogRepository, data):
    row = repo.db.execute(select(Ebook).where(Ebook.title == data["title"])).scalar_one_or_none()
    if row:
        fields = {k: v for k, v in data.items() if k != "title"}
        repo.update_by_id(row.id, fields)
    else:
        repo.insert(data)

def main():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        repo = CatalogRepository(db)
        for d in SEEDS: upsert(repo, d)
        print("Ebooks seed OK")
    finally:
        db.close()

if __name__ == "__main__":
    main()
