import io
import json
import logging

import pytest

from paypro.config import (
    TRUSTED_KEYS_FILE_ENV,
    ProtocolConfig,
    load_trusted_keys,
    trusted_keys_path_from_env,
)
from paypro.exceptions import ConfigurationError
from paypro.logging_config import get_logger, setup_logging


def test_base_headers():
    assert ProtocolConfig.base_headers() == {"x-paypro-version": "2"}


def test_load_trusted_keys(tmp_path, trusted_keys):
    path = tmp_path / "keys.json"
    path.write_text(json.dumps(trusted_keys))

    assert load_trusted_keys(str(path)) == trusted_keys


def test_load_trusted_keys_missing_file(tmp_path):
    with pytest.raises(ConfigurationError, match="Cannot read"):
        load_trusted_keys(tmp_path / "missing.json")


def test_load_trusted_keys_invalid_json(tmp_path):
    path = tmp_path / "keys.json"
    path.write_text("{not json")

    with pytest.raises(ConfigurationError, match="not valid JSON"):
        load_trusted_keys(path)


def test_load_trusted_keys_requires_object(tmp_path):
    path = tmp_path / "keys.json"
    path.write_text("[]")

    with pytest.raises(ConfigurationError, match="JSON object"):
        load_trusted_keys(path)


def test_trusted_keys_path_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv(TRUSTED_KEYS_FILE_ENV, str(tmp_path / "keys.json"))
    assert trusted_keys_path_from_env() == tmp_path / "keys.json"

    monkeypatch.delenv(TRUSTED_KEYS_FILE_ENV)
    assert trusted_keys_path_from_env() is None


def test_setup_logging_writes_to_stream():
    stream = io.StringIO()
    logger = setup_logging(logging.DEBUG, stream=stream, logger_name="paypro.test")
    try:
        get_logger("paypro.test.child").debug("hello from child")
    finally:
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)

    output = stream.getvalue()
    assert "hello from child" in output
    assert "DEBUG" in output
    assert "test_config.py" in output


def test_setup_logging_replaces_handlers():
    logger = setup_logging(logging.INFO, stream=io.StringIO(), logger_name="paypro.twice")
    setup_logging(logging.INFO, stream=io.StringIO(), logger_name="paypro.twice")
    try:
        assert len(logger.handlers) == 1
    finally:
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
