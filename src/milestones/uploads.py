"""Local-disk storage for uploaded milestone images."""
from __future__ import annotations

import os
import secrets
import time
from pathlib import Path
from typing import Iterable, List

from flask import Request
from werkzeug.datastructures import FileStorage

from . import config


def ensure_upload_dir(upload_dir: Path) -> Path:
    upload_dir.mkdir(parents=True, exist_ok=True)
    return upload_dir


def generate_name(original_name: str) -> str:
    """``<ms timestamp>-<random><original extension>``, e.g. ``1700000000000-482913377.png``."""
    extension = os.path.splitext(original_name or "")[1]
    return f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{extension}"


def accept(file: FileStorage, upload_dir: Path) -> str:
    stored_name = generate_name(file.filename or "")
    file.save(ensure_upload_dir(upload_dir) / stored_name)
    return stored_name


def image_parts(request: Request) -> List[FileStorage]:
    """Image parts in the order they were uploaded, skipping empty file inputs.

    Only the first image field name present in the request is read; werkzeug
    groups parts by name, so mixing names would lose the upload order.
    """
    field = next((name for name in request.files if name in config.IMAGE_FIELDS), None)
    if field is None:
        return []
    return [file for file in request.files.getlist(field) if file.filename]


def base_url(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-Proto", "")
    scheme = forwarded.split(",")[0].strip() or request.scheme
    return f"{scheme}://{request.host}"


def url_for(request: Request, stored_name: str) -> str:
    return f"{base_url(request)}{config.UPLOADS_URL_PREFIX}/{stored_name}"


def stored_names(upload_dir: Path) -> Iterable[str]:
    if not upload_dir.exists():
        return []
    return sorted(entry.name for entry in upload_dir.iterdir() if entry.is_file())
