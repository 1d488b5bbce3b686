import logging

import pytest

from time_ticker.logging_setup import console_floor, setup_logging


@pytest.fixture()
def clean_root():
    root = logging.getLogger()
    before, level = list(root.handlers), root.level
    yield root
    for h in list(root.handlers):
        if h not in before:
            root.removeHandler(h)
            h.close()
    root.setLevel(level)
    logging.captureWarnings(False)


@pytest.mark.parametrize(
    "name, floor",
    [
        ("time_ticker", logging.NOTSET),
        ("time_ticker.controller", logging.NOTSET),
        ("qt", logging.WARNING),
        ("qtawesome", logging.ERROR),
        ("py.warnings", logging.ERROR),
        ("time_tickerish", logging.ERROR),
    ],
)
def test_console_floor(name, floor):
    assert console_floor(name) == floor


def test_setup_writes_file_and_replaces_own_handlers(tmp_path, clean_root):
    foreign = logging.NullHandler()
    clean_root.addHandler(foreign)

    setup_logging(log_dir=tmp_path)
    log_file = setup_logging(log_dir=tmp_path)

    added = [h for h in clean_root.handlers if getattr(h, "_time_ticker_handler", False)]
    assert len(added) == 2
    assert foreign in clean_root.handlers

    logging.getLogger("time_ticker.test").debug("hello file")
    for h in added:
        h.flush()
    assert log_file == tmp_path / "time_ticker.log"
    assert "hello file" in log_file.read_text(encoding="utf-8")
    clean_root.removeHandler(foreign)
