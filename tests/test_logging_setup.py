import logging

import pytest

from noiseloop.logging_setup import configure_logging


@pytest.fixture
def restore_root_logging():
    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level
    yield
    for handler in root.handlers:
        if handler not in saved_handlers:
            handler.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


def test_log_file_receives_records(tmp_path, restore_root_logging):
    log_file = tmp_path / "logs" / "render.log"

    logger = configure_logging(log_file=log_file)
    logger.info("rendered %s frames", 3)
    logger.debug("hidden at info level")
    for handler in logging.getLogger().handlers:
        handler.flush()

    contents = log_file.read_text(encoding="utf-8")
    assert "INFO rendered 3 frames" in contents
    assert "hidden at info level" not in contents


def test_verbose_enables_debug_without_file(restore_root_logging, capsys):
    logger = configure_logging(verbose=True)
    logger.debug("debug line")

    assert logger.isEnabledFor(logging.DEBUG)
    assert len(logging.getLogger().handlers) == 1
    assert "DEBUG debug line" in capsys.readouterr().out
