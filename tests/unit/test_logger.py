"""Unit tests for session logging and the context logger prefixes."""

from datetime import datetime

import pytest
from loguru import logger

from vitae.contexts.theming.logger import log_resolution
from vitae.utils.logger import session_log_dir, setup_logger


@pytest.fixture
def restore_loguru():
    yield
    logger.remove()


@pytest.mark.unit
def test_session_log_dir_is_timestamped(tmp_path):
    path = session_log_dir("build", started=datetime(2024, 1, 2, 3, 4, 5), root=tmp_path)
    assert path == tmp_path / "build_20240102_030405"


@pytest.mark.unit
def test_setup_logger_writes_provenance_and_context_lines(tmp_path, restore_loguru):
    log_file = setup_logger("build", tmp_path / "session", provenance={"Theme": "modern"})

    log_resolution("modern", ["modern"], tmp_path / "vitae-theme-modern")
    logger.complete()

    text = log_file.read_text(encoding="utf-8")
    assert log_file == tmp_path / "session" / "build.log"
    assert "Theme: modern" in text
    assert "Candidate 'modern' did not resolve" in text
    assert "[theme] Theme 'modern' ->" in text
