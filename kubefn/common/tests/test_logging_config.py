import json
import logging

from kubefn.common.core import logging_config

LOGGING_YML = """
version: 1
disable_existing_loggers: false
formatters:
  json:
    (): kubefn.common.core.logging_config.CustomJsonFormatter
handlers:
  null_handler:
    class: logging.NullHandler
loggers:
  kubefn_logging_test:
    level: ${LOG_LEVEL}
    handlers: [null_handler]
"""


def _record(**extra):
    record = logging.LogRecord(
        name="kubefn.waiter",
        level=logging.INFO,
        pathname="waiter.py",
        lineno=10,
        msg="Function %s is ready",
        args=("hello",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_custom_json_formatter_fields():
    log_json = json.loads(logging_config.CustomJsonFormatter().format(_record()))

    assert log_json["message"] == "Function hello is ready"
    assert log_json["level"] == "INFO"
    assert log_json["logger"] == "kubefn.waiter"
    assert log_json["_time"].endswith("+00:00")


def test_custom_json_formatter_includes_extra():
    record = _record(function_name="hello", attempts=3)

    log_json = json.loads(logging_config.CustomJsonFormatter().format(record))

    assert log_json["function_name"] == "hello"
    assert log_json["attempts"] == 3
    assert "lineno" not in log_json


def test_load_logging_config_substitutes_env(tmp_path, monkeypatch):
    path = tmp_path / "logging.yml"
    path.write_text(LOGGING_YML)
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    config = logging_config.load_logging_config(str(path))

    assert config["loggers"]["kubefn_logging_test"]["level"] == "DEBUG"


def test_load_logging_config_defaults_level(tmp_path, monkeypatch):
    path = tmp_path / "logging.yml"
    path.write_text(LOGGING_YML)
    monkeypatch.delenv("LOG_LEVEL", raising=False)

    config = logging_config.load_logging_config(str(path))

    assert config["loggers"]["kubefn_logging_test"]["level"] == "INFO"


def test_setup_logging_applies_dict_config(tmp_path, monkeypatch):
    path = tmp_path / "logging.yml"
    path.write_text(LOGGING_YML)
    monkeypatch.setenv("LOG_LEVEL", "WARNING")

    logging_config.setup_logging(str(path))

    assert logging.getLogger("kubefn_logging_test").level == logging.WARNING


def test_setup_logging_falls_back_without_file(tmp_path, monkeypatch):
    calls = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.update(kwargs))

    logging_config.setup_logging(str(tmp_path / "missing.yml"), level="debug")

    assert calls["level"] == "DEBUG"
