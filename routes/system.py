from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends

from core.config import Settings
from .common import get_settings

router = APIRouter()

SERVICE_NAME = "tbb-check"
SERVICE_VERSION = "0.1.0"


def get_git_commit_hash() -> Optional[str]:
    """Current git commit hash, or None outside a checkout."""
    try:
        return (
            subprocess.check_output(
                ["git", "rev-parse", "HEAD"],
                cwd=Path(__file__).parent.parent,
                stderr=subprocess.DEVNULL,
            )
            .decode()
            .strip()
        )
    except (OSError, subprocess.CalledProcessError):
        return None


@router.get("/health")
async def health_check():
    """Simple health check."""
    return {"ok": True}


@router.get("/v1/system/info")
def system_info(settings: Settings = Depends(get_settings)):
    """Service version, commit and non-sensitive configuration."""
    return {
        "ok": True,
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "commit": get_git_commit_hash(),
        "env": {
            "log_level": settings.log_level,
            "gettext_domain": settings.gettext_domain,
        },
    }
