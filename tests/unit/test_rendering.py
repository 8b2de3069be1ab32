"""Unit tests for output writing, format generators and HTML conversion."""

import json
from pathlib import Path
from types import SimpleNamespace

import pytest
import yaml

from vitae.contexts.intake import Resume
from vitae.contexts.rendering import (
    ConversionResult,
    HtmlConversionGenerator,
    HtmlConverter,
    HtmlGenerator,
    JsonGenerator,
    OutputWriter,
    PngGenerator,
    TemplateGenerator,
    YamlGenerator,
    get_generator,
)
from vitae.contexts.templating import TransformedFile
from vitae.contexts.theming import Target, add_freebie_formats, load_theme
from vitae.contexts.theming.theme import FormatDescriptor, TemplateFile
from vitae.utils.exceptions import GenerateError


def _options(**overrides):
    defaults = dict(
        noescape=False,
        freeze_breaks=False,
        prettify=False,
        css="link",
        pdf="wkhtmltopdf",
        head_fragment="",
        on_transform=None,
        before_write=None,
        after_write=None,
    )
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


class FakeConverter(HtmlConverter):
    """Records conversions and writes a placeholder output."""

    def __init__(self, succeed: bool = True):
        super().__init__()
        self.calls = []
        self.succeed = succeed

    def convert(self, source, destination, engine="wkhtmltopdf"):
        self.calls.append((Path(source), Path(destination), engine))
        if not self.succeed:
            return ConversionResult(success=False, engine=engine, errors=[f"{engine} exploded"])
        Path(destination).write_bytes(b"%PDF-fake")
        return ConversionResult(success=True, engine=engine, output_path=Path(destination))


@pytest.fixture
def sheet(sample_resume):
    return Resume().parse_json(sample_resume)


@pytest.fixture
def theme(theme_dir):
    return add_freebie_formats(load_theme(theme_dir))


# Writer


@pytest.mark.unit
def test_writer_places_primary_and_satellite_files(tmp_path):
    primary = TemplateFile(path=tmp_path / "t.html", rel_path="resume.html", primary=True)
    satellite = TemplateFile(path=tmp_path / "t.css", rel_path="css/style.css", ext="css")
    files = [TransformedFile(satellite, "css!"), TransformedFile(primary, "html!")]
    target = tmp_path / "out" / "cv.html"

    written = OutputWriter().write(files, target)

    assert written == [tmp_path / "out" / "css" / "style.css", target]
    assert target.read_text() == "html!"
    assert (tmp_path / "out" / "css" / "style.css").read_text() == "css!"


@pytest.mark.unit
def test_writer_copies_assets_verbatim(tmp_path):
    source = tmp_path / "logo.bin"
    source.write_bytes(b"\x00\x01")
    asset = TemplateFile(path=source, rel_path="img/logo.bin", action="copy")

    OutputWriter().write([TransformedFile(asset)], tmp_path / "out" / "cv.html")

    assert (tmp_path / "out" / "img" / "logo.bin").read_bytes() == b"\x00\x01"


@pytest.mark.unit
def test_writer_pre_save_can_skip_files(tmp_path):
    keep = TemplateFile(path=tmp_path / "a", rel_path="keep.txt")
    drop = TemplateFile(path=tmp_path / "b", rel_path="drop.txt")
    files = [TransformedFile(keep, "keep"), TransformedFile(drop, "drop")]

    written = OutputWriter().write(
        files,
        tmp_path / "out" / "x.txt",
        pre_save=lambda transformed, data: None if data == "drop" else data.upper(),
    )

    assert written == [tmp_path / "out" / "keep.txt"]
    assert (tmp_path / "out" / "keep.txt").read_text() == "KEEP"
    assert not (tmp_path / "out" / "drop.txt").exists()


@pytest.mark.unit
def test_writer_fires_write_callbacks(tmp_path):
    events = []
    options = _options(
        before_write=lambda path: events.append(("before", path.name)),
        after_write=lambda path: events.append(("after", path.name)),
    )
    primary = TemplateFile(path=tmp_path / "t", rel_path="r.txt", primary=True)

    OutputWriter().write([TransformedFile(primary, "x")], tmp_path / "cv.txt", options=options)

    assert events == [("before", "cv.txt"), ("after", "cv.txt")]


@pytest.mark.unit
def test_create_symlinks_replaces_existing(tmp_path):
    out = tmp_path / "out"
    (tmp_path / "assets").mkdir()
    out.mkdir()
    (out / "assets").write_text("stale")
    fmt = FormatDescriptor(out_format="html", ext="html", symlinks={"assets": "../assets"})

    OutputWriter().create_symlinks(fmt, out)
    OutputWriter().create_symlinks(fmt, out)

    link = out / "assets"
    assert link.is_symlink()
    assert link.resolve() == (tmp_path / "assets").resolve()


# Generators


@pytest.mark.unit
@pytest.mark.parametrize(
    "format_name, expected",
    [
        ("html", HtmlGenerator),
        ("pdf", HtmlConversionGenerator),
        ("png", PngGenerator),
        ("json", JsonGenerator),
        ("yml", YamlGenerator),
        ("txt", TemplateGenerator),
        ("doc", TemplateGenerator),
    ],
)
def test_get_generator(format_name, expected):
    generator = get_generator(format_name)
    assert type(generator) is expected
    assert generator.format == format_name


@pytest.mark.unit
def test_json_generator_writes_stringified_resume(sheet, theme, tmp_path):
    target = Target(file=tmp_path / "cv.json", fmt=theme.formats["json"])

    result = JsonGenerator().generate(sheet, target, theme, _options())

    data = json.loads(target.file.read_text())
    assert data["basics"]["name"] == "Jane Doe"
    assert "computed" not in data["basics"]
    assert result.written == [target.file]


@pytest.mark.unit
def test_yaml_generator_writes_yaml(sheet, theme, tmp_path):
    target = Target(file=tmp_path / "cv.yml", fmt=theme.formats["yml"])

    YamlGenerator().generate(sheet, target, theme, _options())

    data = yaml.safe_load(target.file.read_text())
    assert data["basics"]["name"] == "Jane Doe"
    assert data["work"][0]["name"] == "Globex"


@pytest.mark.unit
def test_html_generator_links_css(sheet, theme, tmp_path):
    target = Target(file=tmp_path / "cv.html", fmt=theme.formats["html"])

    HtmlGenerator().generate(sheet, target, theme, _options(css="link"))

    html = target.file.read_text()
    assert '<link rel="stylesheet" href="style.css">' in html
    assert "Builds <strong>reliable</strong> systems." in html
    assert (tmp_path / "style.css").read_text().startswith("body { color: #333; }")


@pytest.mark.unit
def test_html_generator_embeds_css(sheet, theme, tmp_path):
    target = Target(file=tmp_path / "cv.html", fmt=theme.formats["html"])

    HtmlGenerator().generate(sheet, target, theme, _options(css="embed"))

    assert "<style>body { color: #333; }" in target.file.read_text()
    assert not (tmp_path / "style.css").exists()


@pytest.mark.unit
def test_html_generator_prettify(sheet, theme, tmp_path):
    target = Target(file=tmp_path / "cv.html", fmt=theme.formats["html"])

    HtmlGenerator().generate(sheet, target, theme, _options(prettify=True))

    lines = target.file.read_text().splitlines()
    assert " <head>" in lines


@pytest.mark.unit
def test_pdf_generator_converts_sibling_html(sheet, theme, tmp_path):
    converter = FakeConverter()
    target = Target(file=tmp_path / "cv.pdf", fmt=theme.formats["pdf"])

    result = HtmlConversionGenerator(converter=converter).generate(sheet, target, theme, _options(pdf="weasyprint"))

    assert converter.calls == [(tmp_path / "cv.pdf.html", tmp_path / "cv.pdf", "weasyprint")]
    assert "Jane Doe" in (tmp_path / "cv.pdf.html").read_text()
    assert result.success
    assert target.file in result.written


@pytest.mark.unit
def test_pdf_generator_none_engine_skips_conversion(sheet, theme, tmp_path):
    converter = FakeConverter()
    target = Target(file=tmp_path / "cv.pdf", fmt=theme.formats["pdf"])

    HtmlConversionGenerator(converter=converter).generate(sheet, target, theme, _options(pdf="none"))

    assert converter.calls == []
    assert (tmp_path / "cv.pdf.html").exists()
    assert not target.file.exists()


@pytest.mark.unit
def test_pdf_generator_conversion_failure(sheet, theme, tmp_path):
    target = Target(file=tmp_path / "cv.pdf", fmt=theme.formats["pdf"])
    generator = HtmlConversionGenerator(converter=FakeConverter(succeed=False))

    with pytest.raises(GenerateError) as exc_info:
        generator.generate(sheet, target, theme, _options())

    assert "wkhtmltopdf exploded" in str(exc_info.value.inner)


@pytest.mark.unit
def test_png_freebie_borrows_html_templates(sheet, theme, tmp_path):
    converter = FakeConverter()
    target = Target(file=tmp_path / "cv.png", fmt=theme.formats["png"])

    PngGenerator(converter=converter).generate(sheet, target, theme, _options())

    assert converter.calls == [(tmp_path / "cv.png.html", tmp_path / "cv.png", "wkhtmltoimage")]


# Converter


@pytest.mark.unit
def test_converter_rejects_unknown_engine(tmp_path):
    result = HtmlConverter().convert(tmp_path / "a.html", tmp_path / "a.pdf", "phantomjs")
    assert not result.success
    assert "Unsupported conversion engine" in result.errors[0]


@pytest.mark.unit
def test_converter_reports_missing_binary(tmp_path):
    converter = HtmlConverter(commands={"missing": lambda src, dst: ["vitae-no-such-binary", str(src), str(dst)]})

    result = converter.convert(tmp_path / "a.html", tmp_path / "a.pdf", "missing")

    assert not result.success
    assert result.output_path is None
    assert "Cannot run missing" in result.errors[0]


@pytest.mark.unit
def test_converter_reads_default_engine_when_created(monkeypatch):
    monkeypatch.setenv("VITAE_PDF_ENGINE", "weasyprint")
    assert HtmlConverter().default_engine == "weasyprint"

    monkeypatch.delenv("VITAE_PDF_ENGINE")
    assert HtmlConverter().default_engine == "wkhtmltopdf"
    assert HtmlConverter(default_engine="wkhtmltoimage").default_engine == "wkhtmltoimage"


@pytest.mark.unit
def test_pdf_generator_falls_back_to_converter_default(sheet, theme, tmp_path, monkeypatch):
    monkeypatch.setenv("VITAE_PDF_ENGINE", "weasyprint")
    converter = FakeConverter()
    target = Target(file=tmp_path / "cv.pdf", fmt=theme.formats["pdf"])

    HtmlConversionGenerator(converter=converter).generate(sheet, target, theme, _options(pdf=None))

    assert converter.calls[0][2] == "weasyprint"
