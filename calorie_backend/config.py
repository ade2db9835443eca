from __future__ import annotations

import os
from pathlib import Path
from typing import List


class Settings:
    """Centralized configuration for the calorie tracker backend."""

    def __init__(self) -> None:
        base_dir = Path(__file__).resolve().parent
        repo_root = base_dir.parent
        data_root_default = repo_root / "data"

        self.data_root: Path = Path(
            os.environ.get("TRACKER_DATA_ROOT") or data_root_default
        ).expanduser()
        self.db_path: Path = Path(
            os.environ.get("TRACKER_DB_PATH") or (self.data_root / "tracker.db")
        ).expanduser()
        self.uploads_dir: Path = Path(
            os.environ.get("TRACKER_UPLOADS_DIR") or (self.data_root / "uploads")
        ).expanduser()

        # In production you MUST set TRACKER_JWT_SECRET. The dev secret only keeps local demos easy.
        self.jwt_secret: str = os.environ.get("TRACKER_JWT_SECRET") or "dev-secret-change-me"
        self.token_ttl_hours: int = int(os.environ.get("TRACKER_TOKEN_TTL_HOURS") or "24")
        self.max_upload_mb: int = int(os.environ.get("TRACKER_MAX_UPLOAD_MB") or "10")

        # Seeded admin account; skipped unless both email and password are set.
        self.admin_email: str | None = (os.environ.get("TRACKER_ADMIN_EMAIL") or "").strip() or None
        self.admin_password: str | None = os.environ.get("TRACKER_ADMIN_PASSWORD") or None
        self.admin_name: str = os.environ.get("TRACKER_ADMIN_NAME") or "Admin"

        self.gemini_api_key: str | None = os.environ.get("GEMINI_API_KEY")
        self.gemini_base_url: str = os.environ.get(
            "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
        )
        self.gemini_model: str = os.environ.get("GEMINI_MODEL", "gemini-2.0-flash")
        self.gemini_timeout: float = float(os.environ.get("GEMINI_TIMEOUT", "30"))

        self.host: str = os.environ.get("TRACKER_HOST") or os.environ.get("HOST") or "127.0.0.1"
        self.port_raw: str = os.environ.get("TRACKER_PORT") or os.environ.get("PORT") or "8000"

        cors = os.environ.get("TRACKER_CORS_ORIGINS", "*")
        if cors.strip() == "*":
            self.cors_origins: List[str] = ["*"]
        else:
            self.cors_origins = [
                origin.strip() for origin in cors.split(",") if origin.strip()
            ]


settings = Settings()
