"""
Tests for the KitLogger wrapper.
"""
import logging
import uuid

from mssqlkit.messages.logger import LOG_FILE_NAME, ColorFormatter, KitLogger, get_logger


def _unique_name():
    return f"mssqlkit.test.{uuid.uuid4().hex}"


def test_console_handler_only_by_default(monkeypatch):
    monkeypatch.delenv("MSSQLKIT_LOG_DIR", raising=False)

    logger = get_logger(_unique_name())

    assert len(logger.logger.handlers) == 1
    assert logger.logger.propagate is False


def test_handlers_not_duplicated(monkeypatch):
    monkeypatch.delenv("MSSQLKIT_LOG_DIR", raising=False)
    name = _unique_name()

    KitLogger(name)
    second = KitLogger(name)

    assert len(second.logger.handlers) == 1


def test_file_handler_from_env(temp_dir, monkeypatch):
    monkeypatch.setenv("MSSQLKIT_LOG_DIR", str(temp_dir / "logs"))

    logger = KitLogger(_unique_name())
    logger.error("SQL error in execute_scalar: Invalid object name")
    for handler in logger.logger.handlers:
        handler.flush()

    log_text = (temp_dir / "logs" / LOG_FILE_NAME).read_text()
    assert "SQL error in execute_scalar" in log_text
    assert "ERROR" in log_text

    for handler in list(logger.logger.handlers):
        handler.close()
        logger.logger.removeHandler(handler)


def test_set_level():
    logger = KitLogger(_unique_name())

    logger.set_level(logging.DEBUG)

    assert logger.logger.level == logging.DEBUG


def test_color_formatter_adds_component():
    formatter = ColorFormatter("%(component)s%(message)s")
    record = logging.LogRecord(
        "mssqlkit.connections.mssql", logging.INFO, __file__, 1, "hello", None, None
    )

    output = formatter.format(record)

    assert "[mssql]" in output
    assert output.endswith("hello")


def test_start_and_success_are_prefixed(capsys, monkeypatch):
    monkeypatch.delenv("MSSQLKIT_LOG_DIR", raising=False)
    logger = KitLogger(_unique_name())

    logger.start("Testing connection to db/app")
    logger.success("Connection debug completed")

    out = capsys.readouterr().out
    assert "START Testing connection to db/app" in out
    assert "OK Connection debug completed" in out


def test_color_prefix_kept_out_of_file(temp_dir, monkeypatch):
    monkeypatch.setenv("MSSQLKIT_LOG_DIR", str(temp_dir))

    logger = KitLogger(_unique_name())
    logger.success("Initialized mssqlkit.yml")
    for handler in list(logger.logger.handlers):
        handler.flush()
        handler.close()
        logger.logger.removeHandler(handler)

    log_text = (temp_dir / LOG_FILE_NAME).read_text()
    assert "OK Initialized mssqlkit.yml" in log_text
    assert "\x1b[" not in log_text
