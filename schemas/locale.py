from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Locale(BaseModel):
    """A locale known to the translation platform."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    code: str = Field("", description="Locale code, e.g. pt_BR.")
    name: str = Field("", description="English display name.")

    @model_validator(mode="before")
    @classmethod
    def _loose_keys(cls, data: Any) -> Any:
        # Keys match case-insensitively, an exact match wins; null means empty.
        if not isinstance(data, dict):
            return data
        fields: dict[str, Any] = {}
        exact: set[str] = set()
        for key, value in data.items():
            field = key.lower() if isinstance(key, str) else key
            if field not in cls.model_fields:
                continue
            if key == field:
                exact.add(field)
            elif field in exact:
                continue
            fields[field] = "" if value is None else value
        return fields


class LocaleEntry(BaseModel):
    code: str
    name: str
    rtl: bool = False


class LocalePageLinks(BaseModel):
    next: Optional[str] = None
    prev: Optional[str] = None


class LocalePage(BaseModel):
    locales: list[LocaleEntry]
    total: int
    page: int
    per_page: int
    links: LocalePageLinks
