"""Shared fixtures: a throwaway theme and sample resumes written to tmp_path."""

import json
from pathlib import Path

import pytest

THEME_YAML = """\
name: vitae-theme-fixture
version: 1.0.0
description: Minimal theme used by the test suite
engine: jinja2
formats:
  html:
    files:
      - path: src/resume.html.jinja
      - path: src/style.css.jinja
        out: style.css
  pdf:
    files:
      - path: src/resume.html.jinja
"""

HTML_TEMPLATE = """\
<!DOCTYPE html>
<html>
<head>
<title>{{ r.basics.name }}</title>
{% if opts.css == "embed" %}<style>{{ css | safe }}</style>{% else %}<link rel="stylesheet" href="style.css">{% endif %}
</head>
<body>
<h1>{{ r.basics.name }}</h1>
<div class="summary">{{ r.basics.summary }}</div>
{% for job in r.work %}<div class="job">{{ job.name }}: {{ job.position }}</div>
{% endfor %}</body>
</html>
"""

CSS_TEMPLATE = "body { color: #333; } /* {{ RAW.basics.label }} */\n"

SAMPLE_RESUME = {
    "basics": {
        "name": "Jane Doe",
        "label": "Engineer",
        "email": "jane@example.com",
        "summary": "Builds **reliable** systems.",
        "profiles": [{"network": "GitHub", "username": "janedoe"}],
    },
    "work": [
        {"name": "Acme", "position": "Engineer", "startDate": "2015-01", "endDate": "2018-06"},
        {"name": "Globex", "position": "Lead", "startDate": "2018-07"},
    ],
    "skills": [
        {"name": "Python", "keywords": ["asyncio", "pytest"]},
        {"name": "Ops", "keywords": ["docker", "pytest"]},
    ],
}


def write_theme(root: Path, descriptor: str = THEME_YAML, templates: dict = None) -> Path:
    """Write a theme folder; templates maps relative path -> text."""
    templates = templates if templates is not None else {
        "src/resume.html.jinja": HTML_TEMPLATE,
        "src/style.css.jinja": CSS_TEMPLATE,
    }
    root.mkdir(parents=True, exist_ok=True)
    (root / "theme.yaml").write_text(descriptor, encoding="utf-8")
    for rel_path, text in templates.items():
        path = root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return root


def write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def fixed_now(monkeypatch):
    """Pin the clock used for 'present' dates."""
    monkeypatch.setenv("VITAE_NOW", "2024-01-01")


@pytest.fixture
def theme_dir(tmp_path):
    return write_theme(tmp_path / "themes" / "vitae-theme-fixture")


@pytest.fixture
def resume_file(tmp_path):
    return write_json(tmp_path / "resume.json", SAMPLE_RESUME)


@pytest.fixture
def sample_resume():
    return json.loads(json.dumps(SAMPLE_RESUME))


@pytest.fixture
def make_theme(tmp_path):
    """Factory writing a named theme under tmp_path/themes."""

    def _make(name: str = "vitae-theme-custom", descriptor: str = THEME_YAML, templates: dict = None) -> Path:
        return write_theme(tmp_path / "themes" / name, descriptor, templates)

    return _make


@pytest.fixture
def make_resume(tmp_path):
    """Factory writing a resume JSON file under tmp_path."""

    def _make(name: str, data=None) -> Path:
        return write_json(tmp_path / name, SAMPLE_RESUME if data is None else data)

    return _make
