"""
Configuration for the MISMO checklist service.

Settings are read from environment variables (optionally via a ``.env`` file).
Underwriting thresholds are policy constants and live in ``constants.py``.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv


DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024
DEFAULT_ALLOWED_EXTENSIONS = [".xml", ".mismo"]


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


@dataclass
class ChecklistSettings:
    """Runtime settings for the checklist API and batch tooling."""
    enabled: bool = True
    log_level: str = "INFO"
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    allowed_extensions: List[str] = field(
        default_factory=lambda: list(DEFAULT_ALLOWED_EXTENSIONS)
    )
    frontend_url: Optional[str] = None

    @classmethod
    def from_env(cls) -> "ChecklistSettings":
        """Load settings from environment variables."""
        extensions_raw = os.getenv("MISMO_ALLOWED_EXTENSIONS", "")
        extensions = [
            ext.strip().lower() if ext.strip().startswith(".") else f".{ext.strip().lower()}"
            for ext in extensions_raw.split(",")
            if ext.strip()
        ]

        return cls(
            enabled=_env_bool("CHECKLIST_ENABLED", True),
            log_level=os.getenv("CHECKLIST_LOG_LEVEL", "INFO").upper(),
            max_upload_bytes=_env_int("MISMO_MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES),
            allowed_extensions=extensions or list(DEFAULT_ALLOWED_EXTENSIONS),
            frontend_url=os.getenv("FRONTEND_URL") or None,
        )

    def is_allowed_filename(self, filename: str) -> bool:
        """Return True if the filename carries an allowed extension."""
        lowered = (filename or "").lower()
        return any(lowered.endswith(ext) for ext in self.allowed_extensions)


def load_settings() -> ChecklistSettings:
    """Load settings, reading a local .env file first if present."""
    load_dotenv()
    return ChecklistSettings.from_env()
