import hashlib
import logging

import pytest

from dsv_normalizer.normalize import count_line_endings, decode_bytes, load_bytes
from dsv_normalizer.rules import configure_logging, log_level, max_upload_bytes


def test_decode_strips_utf8_bom():
    text, report = decode_bytes(b"\xef\xbb\xbfName,Age\nJohn,30\n")

    assert text == "Name,Age\nJohn,30\n"
    assert report.decode_fallback is False


def test_load_bytes_detects_and_reports():
    raw = "a;b;c\r\n1;2;3\r\n4;5;6".encode("utf-8")
    result = load_bytes(raw, "data.dsv")

    assert result.data.headers == ("a", "b", "c")
    assert result.data.row_count == 2
    assert result.report.delimiter.detected == ";"
    assert result.report.delimiter.used == ";"
    assert result.report.delimiter.overridden is False
    assert result.report.line_endings == {"crlf": 2, "cr": 0, "lf": 0}
    assert result.report.sha256 == hashlib.sha256(raw).hexdigest()


def test_load_bytes_with_explicit_delimiter():
    result = load_bytes(b"a,b|c\n1,2|3", "data.txt", delimiter="|", has_header=False)

    assert result.data.rows == (("a,b", "c"), ("1,2", "3"))
    assert result.report.delimiter.detected == ","
    assert result.report.delimiter.overridden is True
    assert result.report.has_header is False


def test_load_bytes_unicode():
    raw = "名前,都市\n太郎,東京\n".encode("utf-8")
    result = load_bytes(raw, "jp.csv")

    assert result.data.headers == ("名前", "都市")
    assert result.data.rows[0] == ("太郎", "東京")


def test_load_empty_bytes():
    result = load_bytes(b"", "empty.csv")

    assert result.data.row_count == 0
    assert result.data.column_count == 0
    assert result.report.size_bytes == 0


def test_count_line_endings_mixed():
    assert count_line_endings("a\r\nb\rc\nd\r\n") == {"crlf": 2, "cr": 1, "lf": 1}


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("DSV_MAX_UPLOAD_BYTES", "1024")
    monkeypatch.setenv("DSV_LOG_LEVEL", "debug")
    assert max_upload_bytes() == 1024
    assert log_level() == "DEBUG"


def test_invalid_env_overrides_fall_back(monkeypatch):
    monkeypatch.setenv("DSV_MAX_UPLOAD_BYTES", "lots")
    monkeypatch.setenv("DSV_LOG_LEVEL", "chatty")
    assert max_upload_bytes() == 50 * 1024 * 1024
    assert log_level() == "INFO"


@pytest.fixture
def restore_package_level():
    logger = logging.getLogger("dsv_normalizer")
    level = logger.level
    yield
    logger.setLevel(level)


def test_configured_debug_level_emits_records(caplog, restore_package_level):
    configure_logging("DEBUG")
    with caplog.at_level(logging.DEBUG):
        load_bytes(b"a,b\n1,2", "x.csv")

    loaded = [r for r in caplog.records if r.name == "dsv_normalizer.normalize"]
    assert loaded and loaded[0].levelno == logging.INFO
    assert any(
        r.name == "dsv_normalizer.parser" and r.levelno == logging.DEBUG
        for r in caplog.records
    )


def test_configured_warning_level_drops_info(caplog, restore_package_level):
    configure_logging("WARNING")
    with caplog.at_level(logging.DEBUG):
        load_bytes(b"a,b\n1,2", "x.csv")

    assert not [r for r in caplog.records if r.name.startswith("dsv_normalizer")]
