from pathlib import Path
import os

# Raíz del paquete  ->  .../ebook_catalog
APP_DIR = Path(__file__).resolve().parents[1]
# Raíz del repo (padre del paquete)
REPO_ROOT = APP_DIR.parent

# === UPLOADS, FUERA del paquete ===
# Aquí viven covers/ y pdfs/; se puede cambiar con UPLOADS_DIR
UPLOADS_DIR = Path(os.getenv("UPLOADS_DIR", REPO_ROOT / "uploads")).resolve()
UPLOADS_URL_PREFIX = "/uploads"

COVERS_NAMESPACE = "covers"
PDFS_NAMESPACE = "pdfs"

def ensure_upload_dirs(root: Path = UPLOADS_DIR) -> Path:
    for ns in (COVERS_NAMESPACE, PDFS_NAMESPACE):
        (root / ns).mkdir(parents=True, exist_ok=True)
    return root
