from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Mapping

from jinja2 import Environment, FileSystemLoader, Template, TemplateError, select_autoescape

from core.cache import LazyValue
from core.errors import ConfigurationError

logger = logging.getLogger("tbb-check")

# Shared layout, compiled once per process.
BASE_TEMPLATES = ("base.html", "torbutton.html")


class TemplateCache:
    """Owns the compiled shared layout and hands out page templates built on it.

    The Jinja2 environment is created and the base templates compiled on the
    first call to `ensure_compiled()`; later calls return the same
    environment. Page templates (`{% extends "base.html" %}`) are compiled
    into that environment on first request and reused afterwards.
    """

    def __init__(self, public_dir: Path, functions: Mapping[str, Callable[..., Any]]):
        self.public_dir = Path(public_dir)
        self._functions = dict(functions)
        self._env: LazyValue[Environment] = LazyValue(self._build)

    def _build(self) -> Environment:
        env = Environment(
            loader=FileSystemLoader(str(self.public_dir)),
            autoescape=select_autoescape(["html"]),
            auto_reload=False,
            keep_trailing_newline=True,
        )
        env.globals.update(self._functions)
        for name in BASE_TEMPLATES:
            try:
                env.get_template(name)
            except TemplateError as exc:
                raise ConfigurationError(
                    f"Failed to compile layout template {self.public_dir / name}: {exc}"
                ) from exc
        logger.info("templates_compiled", extra={"template_dir": str(self.public_dir)})
        return env

    @property
    def compiled(self) -> bool:
        return self._env.initialized

    def ensure_compiled(self) -> Environment:
        return self._env.get()

    def compile(self, template_name: str) -> Template:
        env = self.ensure_compiled()
        try:
            return env.get_template(template_name)
        except TemplateError as exc:
            raise ConfigurationError(
                f"Failed to compile page template {self.public_dir / template_name}: {exc}"
            ) from exc
