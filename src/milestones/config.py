"""Environment-driven settings for the Milestones service."""
from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DB_FILENAME = "milestones_db.json"
UPLOAD_DIRNAME = "uploads"

DEFAULT_PORT = 3000
DEFAULT_TITLE = "Untitled"
DEFAULT_OWNER = 2

# Multipart field names accepted for image parts, in addition to the metadata field.
IMAGE_FIELDS = ("images", "images[]")
METADATA_FIELD = "event"
UPLOADS_URL_PREFIX = "/uploads"

PORT = int(os.getenv("PORT", str(DEFAULT_PORT)))
HOST = os.getenv("HOST", "0.0.0.0")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DATA_DIR = Path(os.getenv("MILESTONES_DATA_DIR", ".")).resolve()
DB_FILE = Path(os.getenv("MILESTONES_DB_FILE", str(DATA_DIR / DB_FILENAME))).resolve()
UPLOAD_DIR = Path(os.getenv("MILESTONES_UPLOAD_DIR", str(DATA_DIR / UPLOAD_DIRNAME))).resolve()
