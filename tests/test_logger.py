import logging
import os
import re
import time
from datetime import date

import pytest

from chatadapter.logger import CallerFormatter, format_caller, init_logger

STAMP = re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2} ")


@pytest.fixture
def restore_root():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


def _record(name, level, func, path, line, msg):
    record = logging.LogRecord(name, level, path, line, msg, None, None, func=func)
    return record


def test_format_caller_package_function():
    result = format_caller(
        "chatgpt-adapter/internal/plugin.CompleteToolCalls",
        "/home/u/chatgpt-adapter/internal/plugin/toolcall.go",
        10,
        "chatgpt-adapter",
        "/home/u/chatgpt-adapter",
    )
    assert result == " <internal> plugin/toolcall.go:10 |"


def test_format_caller_main_function():
    result = format_caller(
        "main.main",
        "/home/u/chatgpt-adapter/cmd/command.go",
        5,
        "chatgpt-adapter",
        "/home/u/chatgpt-adapter",
    )
    assert result == " <main> cmd/command.go:5 |"


def test_format_caller_falls_back_to_full_file():
    result = format_caller("main.run", "/elsewhere/file.py", 3, "proj", "/root/proj")
    assert result.startswith(" <main> ")
    assert result.endswith("/elsewhere/file.py:3 |")


def test_formatter_line_layout():
    formatter = CallerFormatter()
    record = _record("chatadapter.toolcall", logging.INFO, "run", "/srv/app/chatadapter/toolcall.py", 42, "hello")
    line = formatter.format(record)
    assert STAMP.match(line)
    assert line.endswith("<chatadapter> toolcall.py:42 | [INFO] hello")


@pytest.mark.parametrize("level", [logging.WARNING, logging.ERROR, logging.DEBUG])
def test_formatter_level_is_four_letters(level):
    formatter = CallerFormatter()
    record = _record("app", level, "f", "/x/app.py", 1, "m")
    line = formatter.format(record)
    tag = re.search(r"\[([A-Z]+)\] m$", line)
    assert tag is not None
    assert tag.group(1) == logging.getLevelName(level)[:4]


def test_formatter_includes_arguments():
    formatter = CallerFormatter()
    record = logging.LogRecord("app", logging.INFO, "/x/app.py", 1, "value %s", ("abc",), None, func="f")
    assert formatter.format(record).endswith("value abc")


def test_init_logger_writes_daily_file(tmp_path, restore_root):
    root = init_logger(str(tmp_path / "logs"), logging.INFO)
    logging.getLogger("chatadapter.sample").info("hello file")
    for handler in root.handlers:
        handler.flush()
    path = tmp_path / "logs" / f"background-{date.today():%Y-%m-%d}.log"
    content = path.read_text(encoding="utf-8")
    assert "hello file" in content
    assert "[INFO]" in content
    assert root.level == logging.INFO


def test_init_logger_default_directory(tmp_path, monkeypatch, restore_root):
    monkeypatch.chdir(tmp_path)
    root = init_logger("", "warning")
    assert (tmp_path / "log").is_dir()
    assert root.level == logging.WARNING
    assert root is logging.getLogger()


def test_init_logger_unknown_level(tmp_path, restore_root):
    with pytest.raises(ValueError):
        init_logger(str(tmp_path), "loud")


def test_init_logger_purges_old_files(tmp_path, restore_root):
    old = tmp_path / "background-2000-01-01.log"
    old.write_text("old", encoding="utf-8")
    stale = time.time() - 8 * 24 * 3600
    os.utime(old, (stale, stale))
    recent = tmp_path / "background-2000-01-02.log"
    recent.write_text("recent", encoding="utf-8")
    init_logger(str(tmp_path), logging.INFO)
    assert not old.exists()
    assert recent.exists()


def test_init_logger_replaces_own_handlers(tmp_path, restore_root):
    root = init_logger(str(tmp_path), logging.INFO)
    first = len(root.handlers)
    init_logger(str(tmp_path), logging.INFO)
    assert len(root.handlers) == first