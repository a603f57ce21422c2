"""
Locale resolution and translation lookup.

The page offers a language only when its translation is installed under
`locale/` AND the code is known to the translation platform, whose language
list is kept as a snapshot in `data/langs`. English is always offered.
Display names prefer the curated native names in TRANSLATED_NAMES.
"""

from __future__ import annotations

import gettext
import json
import logging
import re
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterator, Mapping, Union

from pydantic import TypeAdapter, ValidationError

from core.config import DEFAULT_GETTEXT_DOMAIN
from core.errors import ConfigurationError
from schemas.locale import Locale

logger = logging.getLogger("tbb-check")

PathLike = Union[str, Path]

DEFAULT_LOCALE = "en_US"
DEFAULT_LOCALE_NAME = "English"

# Native names, from https://en.wikipedia.org/wiki/List_of_ISO_639-1_codes
# and the Wikipedia sitematrix.
TRANSLATED_NAMES: dict[str, str] = {
    "ar": "العربية",
    "bg": "Български",
    "bn": "বাংলা",
    "bs": "Bosanski jezik",
    "ca": "Català",
    "cs": "Čeština",
    "da": "Dansk",
    "de": "Deutsch",
    "el": "Ελληνικά",
    "en_GB": "English (United Kingdom)",
    "eo": "Esperanto",
    "es": "Español",
    "es_AR": "Español (Argentina)",
    "es_MX": "Español (Mexico)",
    "et": "Eesti",
    "eu": "Euskara",
    "fa": "فارسی",
    "fi": "Suomi",
    "fr": "Français",
    "ga": "Gaeilge",
    "he": "עברית",
    "hi": "हिन्दी",
    "hr": "Hrvatski jezik",
    "hr_HR": "Hrvatski jezik (Croatia)",
    "hu": "Magyar",
    "id": "Bahasa Indonesia",
    "is": "Íslenska",
    "it": "Italiano",
    "ja": "日本語",
    "ka": "ქართული",
    "ko": "한국어",
    "lt": "lietuvių kalba",
    "lv": "Latviešu valoda",
    "mk": "македонски јазик",
    "ms_MY": "Bahasa Melayu",
    "nb": "Norsk bokmål",
    "nl": "Nederlands",
    "nl_BE": "Vlaams",
    "nn": "Norsk nynorsk",
    "pa": "ਪੰਜਾਬੀ",
    "pl": "Język polski",
    "pt": "Português",
    "pt_BR": "Português brasileiro",
    "pt_PT": "Português europeu",
    "ro": "română",
    "ru": "русский язык",
    "sk": "Slovenčina",
    "sq": "shqip",
    "sr": "српски језик",
    "sv": "Svenska",
    "ta": "தமிழ்",
    "th": "ไทย",
    "tr": "Türkçe",
    "uk": "українська мова",
    "vi": "Tiếng Việt",
    "zh_CN": "简体中文",
    "zh_HK": "繁體中文（香港）",
    "zh_TW": "正體中文",
}

RTL_LANGUAGES = {"ar", "ckb", "dv", "fa", "he", "ps", "sd", "ug", "ur", "yi"}

_JSON_WHITESPACE = re.compile(r"[ \t\n\r]*")
_LOCALE_LIST = TypeAdapter(list[Locale])


def is_rtl(code: str) -> bool:
    return code.split("_")[0].lower() in RTL_LANGUAGES


def _iter_json_values(text: str) -> Iterator[Any]:
    """Decode a stream of concatenated JSON documents until end of input."""
    decoder = json.JSONDecoder()
    idx = _JSON_WHITESPACE.match(text, 0).end()
    while idx < len(text):
        value, idx = decoder.raw_decode(text, idx)
        yield value
        idx = _JSON_WHITESPACE.match(text, idx).end()


def fetch_translation_locales(base: PathLike) -> dict[str, Locale]:
    """Load the translation platform's language list from `data/langs`.

    The file holds one or more JSON arrays of `{code, name}` records; all
    of them are merged. OSError propagates when the file cannot be read.
    Malformed content raises ConfigurationError.
    """
    path = Path(base) / "data" / "langs"
    raw = path.read_bytes()

    registry: dict[str, Locale] = {}
    try:
        for value in _iter_json_values(raw.decode("utf-8")):
            if value is None:
                continue
            for locale in _LOCALE_LIST.validate_python(value):
                registry[locale.code] = locale
    except (UnicodeDecodeError, json.JSONDecodeError, ValidationError) as exc:
        raise ConfigurationError(f"Malformed language list {path}: {exc}") from exc

    return registry


def get_installed_locales(
    base: PathLike,
    registry: Mapping[str, Locale],
    name_overrides: Mapping[str, str],
) -> dict[str, str]:
    """Locales installed under `locale/` that the registry knows about."""
    locale_dir = Path(base) / "locale"
    try:
        entries = sorted(locale_dir.iterdir())
    except OSError as exc:
        logger.error("No locales found in 'locale'. Try running 'make i18n'.")
        raise ConfigurationError(f"Cannot list locale directory {locale_dir}: {exc}") from exc

    locales = {DEFAULT_LOCALE: DEFAULT_LOCALE_NAME}

    for entry in entries:
        code = entry.name
        if code == DEFAULT_LOCALE or not entry.is_dir() or code not in registry:
            continue

        translated = name_overrides.get(code)
        if translated:
            locales[code] = translated
        else:
            logger.info("No translated name for code: %s", code)
            locales[code] = registry[code].name

    return locales


def get_locale_list(base: PathLike) -> dict[str, str]:
    """Locale code -> display name for the language selector.

    When the language list cannot be read, every curated name is offered as
    is, installed or not.
    """
    try:
        registry = fetch_translation_locales(base)
    except OSError:
        logger.warning("Failed to get up to date language list, using fallback.", exc_info=True)
        return dict(TRANSLATED_NAMES)

    return get_installed_locales(base, registry, TRANSLATED_NAMES)


class Translator:
    """gettext lookups keyed by locale code.

    Codes without an installed catalog get the source text back; the code
    itself is never validated against the locale list.
    """

    def __init__(self, locale_dir: PathLike, domain: str = DEFAULT_GETTEXT_DOMAIN, cache_size: int = 128):
        self.locale_dir = Path(locale_dir)
        self.domain = domain
        self._catalog = lru_cache(maxsize=cache_size)(self._load)

    def _load(self, lang: str) -> gettext.NullTranslations:
        if not lang or "/" in lang or "\\" in lang or lang.startswith("."):
            return gettext.NullTranslations()
        return gettext.translation(
            self.domain,
            localedir=str(self.locale_dir),
            languages=[lang],
            fallback=True,
        )

    def gettext(self, lang: str, text: str) -> str:
        return self._catalog(lang).gettext(text)
