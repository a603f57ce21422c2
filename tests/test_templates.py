import threading

import pytest
from markupsafe import Markup

from core.errors import ConfigurationError
from core.templates import TemplateCache
from services.i18n import Translator
from services.renderer import PageRenderer, template_functions


def _cache(public_dir, translator=None):
    translator = translator or Translator(public_dir.parent / "locale")
    return TemplateCache(public_dir, template_functions(translator))


def test_ensure_compiled_is_idempotent(base_dir):
    cache = _cache(base_dir / "public")
    assert cache.compiled is False
    env = cache.ensure_compiled()
    assert cache.compiled is True
    assert cache.ensure_compiled() is env
    assert cache.compile("index.html") is cache.compile("index.html")


def test_ensure_compiled_concurrent_first_access(base_dir):
    cache = _cache(base_dir / "public")
    start = threading.Barrier(6)
    envs = []

    def worker():
        start.wait()
        envs.append(cache.ensure_compiled())

    threads = [threading.Thread(target=worker) for _ in range(6)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(envs) == 6
    assert all(env is envs[0] for env in envs)


def test_missing_layout_is_configuration_error(base_dir):
    (base_dir / "public" / "torbutton.html").unlink()
    with pytest.raises(ConfigurationError):
        _cache(base_dir / "public").ensure_compiled()


def test_layout_syntax_error_is_configuration_error(base_dir):
    (base_dir / "public" / "base.html").write_text("{% block content %}", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        _cache(base_dir / "public").ensure_compiled()


def test_missing_page_is_configuration_error(base_dir):
    cache = _cache(base_dir / "public")
    with pytest.raises(ConfigurationError):
        cache.compile("nope.html")


def test_template_functions(base_dir):
    functions = template_functions(Translator(base_dir / "locale"))
    assert isinstance(functions["unescaped"]("<b>x</b>"), Markup)
    assert isinstance(functions["unescaped_url"]("https://example.org/?a=1&b=2"), Markup)
    assert functions["gettext"]("de", "Language") == "Language"
    assert functions["equal"]("de", "de") is True
    assert functions["equal"]("de", "fr") is False
    assert functions["not_"](False) is True
    assert functions["and_"](True, False) is False
    assert functions["and_"](True, True) is True


def test_helpers_available_in_page_templates(base_dir):
    (base_dir / "public" / "helpers.html").write_text(
        '{% extends "base.html" %}{% block content %}'
        "[{{ unescaped('<i>raw</i>') }}|{{ '<i>esc</i>' }}|{{ equal(lang, 'de') }}|{{ and_(true, not_(false)) }}]"
        "{% endblock %}",
        encoding="utf-8",
    )
    html = PageRenderer(base_dir).render("helpers.html", lang="de", small=True)
    assert "[<i>raw</i>|&lt;i&gt;esc&lt;/i&gt;|True|True]" in html


def test_renderer_warm_builds_everything(base_dir):
    renderer = PageRenderer(base_dir)
    renderer.warm()
    assert renderer.templates.compiled is True
    assert renderer.locales()["en_US"] == "English"


def test_renderer_marks_rtl_locales(base_dir):
    html = PageRenderer(base_dir).render("index.html", lang="fa", likely_tbb=True, ip=None, small=False)
    assert 'dir="rtl"' in html
    assert 'lang="fa"' in html


def test_unescaped_url_stays_inside_attribute(base_dir):
    (base_dir / "public" / "link.html").write_text(
        '{% extends "base.html" %}{% block content %}'
        '<a href="{{ unescaped_url(u) }}">x</a>'
        "{% endblock %}",
        encoding="utf-8",
    )
    u = 'https://e.org/?a=1&b=2" onmouseover="alert(1)'
    html = PageRenderer(base_dir).render("link.html", lang="en_US", small=True, u=u)
    assert '<a href="https://e.org/?a=1&amp;b=2%22%20onmouseover=%22alert(1)">x</a>' in html
    assert "onmouseover=\"" not in html


def test_unescaped_url_keeps_plain_urls():
    from services.renderer import unescaped_url

    assert unescaped_url("https://www.torproject.org/download/") == "https://www.torproject.org/download/"
    assert unescaped_url("/?lang=de&small=1") == "/?lang=de&amp;small=1"
