"""Application configuration. Loads from environment and .env file."""
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent
# Load .env from cwd, then backend/.env, then project root .env
load_dotenv()
load_dotenv(BASE_DIR / ".env")
load_dotenv(BASE_DIR.parent / ".env")

# Accepted uploads (mirrors the file picker of the web UI)
INPUT_EXTENSIONS = [".jpeg", ".jpg", ".png", ".avif", ".svg", ".ico", ".webp"]
OUTPUT_FORMATS = ["png", "jpeg", "jpg", "webp", "avif", "svg", "ico"]

# Conversion options (env overrides)
DEFAULT_QUALITY = int(os.getenv("DEFAULT_QUALITY", "92"))
ICO_SIZES = (16, 24, 32, 48, 64, 128, 256)

# Quality slider shown by clients, as a 0-1 float
QUALITY_MIN = 0.10
QUALITY_MAX = 1.00
QUALITY_STEP = 0.01

# Limits (env)
MAX_UPLOAD_SIZE_MB = int(os.getenv("MAX_UPLOAD_SIZE_MB", "20"))
MAX_UPLOAD_SIZE_BYTES = MAX_UPLOAD_SIZE_MB * 1024 * 1024

# Server (for uvicorn)
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
# CORS: comma-separated origins, e.g. "http://localhost:3000,http://127.0.0.1:3000"
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()]

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("converter")
