from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class ClientCheck(BaseModel):
    """Detection verdict for the requesting client."""

    likely_tbb: bool = Field(..., description="User-Agent has the Tor Browser shape. Advisory only.")
    ip: Optional[str] = Field(None, description="Apparent client address, null when unknown.")
    lang: str = Field(..., description="Requested locale code, unvalidated.")
