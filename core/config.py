from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent

DEFAULT_GETTEXT_DOMAIN = "check"


def _split_origins(raw: str) -> list[str]:
    if raw.strip() == "*":
        return ["*"]
    return [o.strip() for o in raw.split(",") if o.strip()]


@dataclass(frozen=True)
class Settings:
    """Runtime configuration, read from the environment (and `.env`)."""

    base_dir: Path = PROJECT_ROOT
    gettext_domain: str = DEFAULT_GETTEXT_DOMAIN
    log_level: str = "INFO"
    allowed_origins: list[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls) -> "Settings":
        base_dir = os.getenv("CHECK_BASE_DIR")
        return cls(
            base_dir=Path(base_dir).expanduser().resolve() if base_dir else PROJECT_ROOT,
            gettext_domain=os.getenv("CHECK_GETTEXT_DOMAIN", DEFAULT_GETTEXT_DOMAIN),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            allowed_origins=_split_origins(os.getenv("ALLOWED_ORIGINS", "*")),
        )
