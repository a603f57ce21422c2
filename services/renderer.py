from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

from markupsafe import Markup, escape

from core.cache import LazyValue
from core.config import DEFAULT_GETTEXT_DOMAIN, Settings
from core.templates import TemplateCache
from services.i18n import DEFAULT_LOCALE, Translator, get_locale_list, is_rtl

INDEX_TEMPLATE = "index.html"

_URL_UNSAFE = str.maketrans({
    '"': "%22",
    "'": "%27",
    "<": "%3C",
    ">": "%3E",
    " ": "%20",
})


def unescaped(x: str) -> Markup:
    """Mark trusted markup (usually a translated string) as safe HTML."""
    return Markup(x)


def unescaped_url(x: str) -> Markup:
    """Trust a URL but keep it attribute-safe: quotes, angle brackets and
    spaces are percent-encoded and the rest is HTML-escaped."""
    return escape(x.translate(_URL_UNSAFE))


def equal(one: str, two: str) -> bool:
    return one == two


def not_(b: bool) -> bool:
    return not b


def and_(a: bool, b: bool) -> bool:
    return a and b


def template_functions(translator: Translator) -> dict[str, Callable[..., Any]]:
    return {
        "unescaped": unescaped,
        "unescaped_url": unescaped_url,
        "gettext": translator.gettext,
        "equal": equal,
        "not_": not_,
        "and_": and_,
    }


class PageRenderer:
    """Renders the localized pages.

    Holds the process-wide pieces every request shares: the translator, the
    compiled templates and the locale catalog. The last two are built on
    first use, or up front through `warm()`.
    """

    def __init__(self, base_dir: Path, domain: str = DEFAULT_GETTEXT_DOMAIN):
        self.base_dir = Path(base_dir)
        self.translator = Translator(self.base_dir / "locale", domain)
        self.templates = TemplateCache(self.base_dir / "public", template_functions(self.translator))
        self._locales: LazyValue[dict[str, str]] = LazyValue(lambda: get_locale_list(self.base_dir))

    @classmethod
    def from_settings(cls, settings: Settings) -> "PageRenderer":
        return cls(settings.base_dir, settings.gettext_domain)

    def locales(self) -> dict[str, str]:
        return self._locales.get()

    def locale_entries(self) -> list[dict[str, Any]]:
        return [
            {"code": code, "name": name, "rtl": is_rtl(code)}
            for code, name in sorted(self.locales().items())
        ]

    def warm(self) -> None:
        self.locales()
        self.templates.ensure_compiled()
        self.templates.compile(INDEX_TEMPLATE)

    def render(self, template_name: str, **context: Any) -> str:
        lang = context.setdefault("lang", DEFAULT_LOCALE)
        context.setdefault("rtl", is_rtl(lang))
        context.setdefault("locales", self.locale_entries())
        return self.templates.compile(template_name).render(**context)
