"""Unit tests for pre-escaping, rendering backends and the template engine."""

from pathlib import Path
from types import SimpleNamespace

import pytest
from markupsafe import Markup

from vitae.contexts.templating import (
    BackendRegistry,
    Jinja2Backend,
    LatexBackend,
    TemplateEngine,
    default_registry,
    escape_for_format,
    freeze,
    markdownify,
    unfreeze,
    xmlify,
)
from vitae.contexts.templating.escaping import to_latex
from vitae.contexts.theming.theme import FormatDescriptor, TemplateFile, Theme
from vitae.utils.exceptions import TemplateCompileError, TemplateInvokeError, UnregisteredBackend

RESUME = {
    "basics": {
        "name": "Jane & Co",
        "summary": "Builds **reliable** systems.",
        "email": "jane_doe@example.com",
        "label": "Senior *Engineer*",
    },
    "work": [{"name": "Acme", "startDate": "2015-01", "highlights": ["Cut costs by **50%**"]}],
}


def _options(**overrides):
    defaults = dict(noescape=False, freeze_breaks=False, on_transform=None, head_fragment="", css="link")
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


def _file(tmp_path: Path, name: str, data: str, primary: bool = False) -> TemplateFile:
    return TemplateFile(
        path=tmp_path / name, rel_path=name, ext=name.rsplit(".", 1)[-1], primary=primary, data=data
    )


def _theme(tmp_path: Path, engine: str = "jinja2") -> Theme:
    return Theme(name="test", root=tmp_path, engine=engine)


# Pre-escaping


@pytest.mark.unit
def test_markdownify_renders_block_and_inline_fields():
    escaped = markdownify(RESUME)

    assert escaped["basics"]["summary"] == "<p>Builds <strong>reliable</strong> systems.</p>"
    assert escaped["basics"]["label"] == "Senior <em>Engineer</em>"
    assert escaped["work"][0]["highlights"] == ["Cut costs by <strong>50%</strong>"]
    assert isinstance(escaped["basics"]["label"], Markup)


@pytest.mark.unit
def test_markdownify_skips_contact_and_date_fields():
    escaped = markdownify(RESUME)

    assert escaped["basics"]["email"] == "jane_doe@example.com"
    assert escaped["work"][0]["startDate"] == "2015-01"
    assert RESUME["basics"]["summary"] == "Builds **reliable** systems."


@pytest.mark.unit
def test_xmlify_escapes_every_string():
    escaped = xmlify({"basics": {"name": 'Jane & "Co" <x>'}})
    assert escaped["basics"]["name"] == "Jane &amp; &quot;Co&quot; &lt;x&gt;"


@pytest.mark.unit
@pytest.mark.parametrize("format_name", ["txt", "md", "latex", "json"])
def test_other_formats_are_untouched(format_name):
    assert escape_for_format(RESUME, format_name) is RESUME


@pytest.mark.unit
def test_noescape_skips_escaping():
    assert escape_for_format(RESUME, "html", noescape=True) is RESUME


@pytest.mark.unit
def test_to_latex_escapes_specials_once():
    assert to_latex("50% of R&D_ops") == r"50\% of R\&D\_ops"
    assert to_latex("a\\b{c}") == r"a\textbackslash{}b\{c\}"
    assert to_latex(None) == ""


# Freeze


@pytest.mark.unit
@pytest.mark.parametrize(
    "text",
    [
        "",
        "one line",
        "a\nb\r\nc\n\n",
        "<p>\n  {{ r.basics.name }}\r</p>\n",
        "a &newl; b\n",
        "&retn;&frz;\r\n&&newl\n",
        "&frz;newl;\n&amp;",
    ],
)
def test_freeze_round_trip(text):
    frozen = freeze(text)
    assert "\n" not in frozen and "\r" not in frozen
    assert unfreeze(frozen) == text


# Backends


@pytest.mark.unit
def test_jinja2_backend_context(tmp_path):
    backend = Jinja2Backend()
    template = "{{ r.basics.label }}|{{ RAW.basics.label }}|{{ format }}|{{ engine }}|{{ theme.name }}"

    out = backend.generate(RESUME, template, "html", None, _options(), _theme(tmp_path))

    assert out == "Senior <em>Engineer</em>|Senior *Engineer*|html|jinja2|test"


@pytest.mark.unit
def test_jinja2_backend_autoescapes_raw_markup_formats(tmp_path):
    out = Jinja2Backend().generate(RESUME, "{{ RAW.basics.name }}", "html", None, _options(), _theme(tmp_path))
    assert out == "Jane &amp; Co"

    out = Jinja2Backend().generate(RESUME, "{{ RAW.basics.name }}", "txt", None, _options(), _theme(tmp_path))
    assert out == "Jane & Co"


@pytest.mark.unit
def test_jinja2_backend_missing_keys_render_empty(tmp_path):
    out = Jinja2Backend().generate(RESUME, "[{{ r.basics.nope.deeper }}]", "txt", None, _options(), _theme(tmp_path))
    assert out == "[]"


@pytest.mark.unit
def test_jinja2_backend_filters_and_includes(tmp_path):
    (tmp_path / "partials").mkdir()
    (tmp_path / "partials" / "name.txt").write_text("{{ RAW.basics.name | lower }}", encoding="utf-8")

    template = '{% include "partials/name.txt" %}/{{ "x_y" | latex }}/{{ filt.mdin("*a*") }}'
    out = Jinja2Backend().generate(RESUME, template, "txt", None, _options(), _theme(tmp_path))

    assert out == "jane & co/x\\_y/<em>a</em>"


@pytest.mark.unit
def test_backend_compile_error(tmp_path):
    with pytest.raises(TemplateCompileError) as exc_info:
        Jinja2Backend().generate(RESUME, "{% for x in %}", "txt", None, _options(), _theme(tmp_path))
    assert exc_info.value.inner is not None


@pytest.mark.unit
def test_backend_invoke_error(tmp_path):
    with pytest.raises(TemplateInvokeError) as exc_info:
        Jinja2Backend().generate(RESUME, "{{ 1 / 0 }}", "txt", None, _options(), _theme(tmp_path))
    assert isinstance(exc_info.value.inner, ZeroDivisionError)


@pytest.mark.unit
def test_latex_backend_custom_delimiters(tmp_path):
    template = r"\name{<<< RAW.basics.name >>>}<%% for job in RAW.work %%>\job{<<< job.name >>>}<%% endfor %%><# note #>"

    out = LatexBackend().generate(RESUME, template, "latex", None, _options(), _theme(tmp_path, "latex"))

    assert out == r"\name{Jane & Co}\job{Acme}"


@pytest.mark.unit
def test_latex_backend_is_strict(tmp_path):
    with pytest.raises(TemplateInvokeError):
        LatexBackend().generate(RESUME, "<<< RAW.missing >>>", "latex", None, _options(), _theme(tmp_path, "latex"))


@pytest.mark.unit
def test_generate_simple():
    assert Jinja2Backend().generate_simple({"who": "world"}, "hello {{ who }}") == "hello world"


@pytest.mark.unit
def test_environment_caching(tmp_path):
    backend = Jinja2Backend()
    env = backend.get_environment(tmp_path, True)

    assert backend.is_cached(tmp_path, True)
    assert backend.get_environment(tmp_path, True) is env
    assert not backend.is_cached(tmp_path, False)

    backend.clear_cache()
    assert not backend.is_cached(tmp_path, True)


# Registry


@pytest.mark.unit
def test_default_registry_backends():
    registry = default_registry()

    assert registry.names() == ["jinja", "jinja2", "latex"]
    assert isinstance(registry.get_backend("jinja2"), Jinja2Backend)
    assert isinstance(registry.get_backend("JINJA"), Jinja2Backend)
    assert isinstance(registry.get_backend("latex"), LatexBackend)


@pytest.mark.unit
def test_registry_caches_instances():
    registry = default_registry()

    first = registry.get_backend("latex")
    assert registry.is_cached("latex")
    assert registry.get_backend("latex") is first

    registry.clear_cache()
    assert not registry.is_cached("latex")


@pytest.mark.unit
def test_registry_unknown_backend():
    with pytest.raises(UnregisteredBackend) as exc_info:
        default_registry().get_backend("handlebars")
    assert exc_info.value.name == "handlebars"
    assert "jinja2" in exc_info.value.available


@pytest.mark.unit
def test_registry_rejects_non_backends():
    with pytest.raises(TypeError):
        BackendRegistry().register("bogus", dict)


# Engine


@pytest.mark.unit
def test_engine_transforms_css_first_and_exposes_it(tmp_path):
    html = _file(tmp_path, "resume.html", "<style>{{ css | safe }}</style>{{ results | length }}", primary=True)
    css = _file(tmp_path, "style.css", "h1 { color: red; }")
    fmt = FormatDescriptor(out_format="html", ext="html", files=[html, css])
    seen = []

    results = TemplateEngine().invoke(RESUME, fmt, _theme(tmp_path), _options(on_transform=seen.append))

    assert [r.info.rel_path for r in results] == ["style.css", "resume.html"]
    assert results[1].data == "<style>h1 { color: red; }</style>1"
    assert seen == [css, html]


@pytest.mark.unit
def test_engine_passes_copy_files_through(tmp_path):
    asset = TemplateFile(path=tmp_path / "logo.png", rel_path="logo.png", action="copy", ext="png")
    fmt = FormatDescriptor(out_format="html", ext="html", files=[asset])

    results = TemplateEngine().invoke(RESUME, fmt, _theme(tmp_path), _options())

    assert results[0].data is None


@pytest.mark.unit
def test_engine_freeze_breaks_preserves_line_endings(tmp_path):
    text = "line one\n{{ RAW.basics.name }}\r\nline three\n"
    fmt = FormatDescriptor(out_format="txt", ext="txt", files=[_file(tmp_path, "resume.txt", text, primary=True)])

    frozen = TemplateEngine().invoke(RESUME, fmt, _theme(tmp_path), _options(freeze_breaks=True))
    plain = TemplateEngine().invoke(RESUME, fmt, _theme(tmp_path), _options())

    assert frozen[0].data == "line one\nJane & Co\r\nline three\n"
    # Jinja normalizes line endings when breaks are not frozen
    assert plain[0].data == "line one\nJane & Co\nline three\n"


@pytest.mark.unit
def test_engine_freeze_breaks_keeps_literal_tokens(tmp_path):
    text = "keep &newl; and &retn;\n{{ RAW.basics.name }}\n"
    fmt = FormatDescriptor(out_format="txt", ext="txt", files=[_file(tmp_path, "resume.txt", text, primary=True)])

    results = TemplateEngine().invoke(RESUME, fmt, _theme(tmp_path), _options(freeze_breaks=True))

    assert results[0].data == "keep &newl; and &retn;\nJane & Co\n"


@pytest.mark.unit
def test_engine_unknown_theme_engine(tmp_path):
    fmt = FormatDescriptor(out_format="txt", ext="txt", files=[_file(tmp_path, "resume.txt", "x", primary=True)])
    with pytest.raises(UnregisteredBackend):
        TemplateEngine().invoke(RESUME, fmt, _theme(tmp_path, engine="mustache"), _options())


@pytest.mark.unit
def test_engine_uses_injected_registry(tmp_path):
    registry = BackendRegistry()
    registry.register("custom", LatexBackend)
    fmt = FormatDescriptor(out_format="latex", ext="tex", files=[_file(tmp_path, "r.tex", "<<< RAW.basics.name >>>", True)])

    results = TemplateEngine(registry).invoke(RESUME, fmt, _theme(tmp_path, engine="custom"), _options())

    assert results[0].data == "Jane & Co"
