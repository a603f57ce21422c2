from __future__ import annotations

from core.cache import LazyValue
from core.config import Settings
from services.renderer import PageRenderer

settings = LazyValue(Settings.from_env)
_renderer = LazyValue(lambda: PageRenderer.from_settings(settings.get()))


def get_settings() -> Settings:
    return settings.get()


def get_renderer() -> PageRenderer:
    """Dependency returning the renderer shared by the process."""
    return _renderer.get()
