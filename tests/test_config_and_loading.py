import logging

import pytest

from concordia import ConcordiaConfig, __version__
from concordia.exceptions import DocumentLoadError
from concordia.parsers import load_document_file, load_document_from_bytes, load_document_from_string
from concordia.parsers.document_loader import format_for_path
from concordia.resolvers import UrlFetcher
from concordia.utils import configure_split_stream_logging


@pytest.fixture
def library_logger():
    logger = logging.getLogger("concordia")
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


def test_config_defaults(monkeypatch):
    for name in (
        "CONCORDIA_FETCH_TIMEOUT",
        "CONCORDIA_LOG_LEVEL",
        "CONCORDIA_PRINT_LEVEL",
        "CONCORDIA_USER_AGENT",
    ):
        monkeypatch.delenv(name, raising=False)

    config = ConcordiaConfig.from_env()
    assert config.fetch_timeout == 10.0
    assert config.log_level == "INFO"
    assert config.print_level == "ERROR"
    assert config.user_agent == f"concordia/{__version__}"


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("CONCORDIA_FETCH_TIMEOUT", "2.5")
    monkeypatch.setenv("CONCORDIA_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("CONCORDIA_USER_AGENT", "tests")

    config = ConcordiaConfig.from_env()
    assert config.fetch_timeout == 2.5
    assert config.log_level == "DEBUG"
    assert config.user_agent == "tests"


def test_fetcher_explicit_settings():
    fetcher = UrlFetcher(timeout=3.0, user_agent="agent")
    assert fetcher.timeout == 3.0
    assert fetcher.user_agent == "agent"


def test_set_logging_configures_library_logger_only(library_logger):
    root_handlers = list(logging.getLogger().handlers)
    logger = ConcordiaConfig(log_level="DEBUG", print_level="WARNING").set_logging()

    assert logger.name == "concordia"
    assert logger.level == logging.DEBUG
    assert not logger.propagate
    assert len(logger.handlers) == 2
    assert logging.getLogger().handlers == root_handlers


def test_split_stream_logging(capsys, library_logger):
    configure_split_stream_logging(level=logging.INFO, stderr_level=logging.WARNING)
    child = logging.getLogger("concordia.tests")

    child.info("to stdout")
    child.warning("to stderr")

    captured = capsys.readouterr()
    assert "to stdout" in captured.out
    assert "to stdout" not in captured.err
    assert "to stderr" in captured.err
    assert "to stderr" not in captured.out


def test_format_for_path():
    assert format_for_path("schema.yaml") == "yaml"
    assert format_for_path("schema.YML") == "yaml"
    assert format_for_path("schema.json") == "json"
    assert format_for_path("schema") == "json"


def test_load_documents(tmp_path):
    assert load_document_from_string('{"a": [1, null]}') == {"a": [1, None]}
    assert load_document_from_string("a:\n  - 1\n  - null\n", "yaml") == {"a": [1, None]}
    assert load_document_from_bytes(b'\xef\xbb\xbf{"a": true}') == {"a": True}

    path = tmp_path / "doc.yml"
    path.write_text("type: object\nfields: []\n", encoding="utf-8")
    assert load_document_file(path) == {"type": "object", "fields": []}


def test_load_errors(tmp_path):
    with pytest.raises(DocumentLoadError):
        load_document_from_string("{")
    with pytest.raises(DocumentLoadError):
        load_document_from_string("a: [", "yaml")
    with pytest.raises(DocumentLoadError):
        load_document_from_bytes(b"\xff\xfe")
    with pytest.raises(DocumentLoadError, match="not a file"):
        load_document_file(tmp_path)
    with pytest.raises(ValueError, match="Unsupported document format"):
        load_document_from_string("{}", "toml")
