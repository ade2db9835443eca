# -*- coding: utf-8 -*-
"""Uploaded image files (profile photos, food photos) under the uploads directory."""

from __future__ import annotations

import random
import re
import time
from dataclasses import dataclass
from pathlib import Path

from fastapi import HTTPException, UploadFile

from ..config import settings


@dataclass(frozen=True)
class StoredUpload:
    filename: str
    path: Path
    content_type: str
    size_bytes: int


def _ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def _safe_suffix(filename: str) -> str:
    suffix = Path(filename or "").suffix.lower()
    if not suffix:
        return ""
    if len(suffix) > 12:
        return ""
    if not re.fullmatch(r"\.[a-z0-9]+", suffix):
        return ""
    return suffix


def _unique_name(field_name: str, original: str) -> str:
    millis = int(time.time() * 1000)
    rand = random.randint(0, 10**9)
    return f"{field_name}-{millis}-{rand}{_safe_suffix(original)}"


def save_image_upload(upload: UploadFile, *, field_name: str, uploads_dir: Path | None = None) -> StoredUpload:
    """Stream an image upload to disk; 400 for non-images or oversized files."""
    content_type = upload.content_type or ""
    if not content_type.startswith("image/"):
        raise HTTPException(status_code=400, detail="Only image files are allowed!")

    root = uploads_dir or settings.uploads_dir
    _ensure_dir(root)
    filename = _unique_name(field_name, upload.filename or "")
    path = root / filename

    size = 0
    max_bytes = int(settings.max_upload_mb) * 1024 * 1024
    try:
        with path.open("wb") as f:
            while True:
                chunk = upload.file.read(1024 * 256)
                if not chunk:
                    break
                size += len(chunk)
                if size > max_bytes:
                    raise HTTPException(status_code=400, detail=f"File too large (> {settings.max_upload_mb} MB)")
                f.write(chunk)
    except HTTPException:
        path.unlink(missing_ok=True)
        raise
    finally:
        upload.file.close()

    return StoredUpload(filename=filename, path=path, content_type=content_type, size_bytes=size)
