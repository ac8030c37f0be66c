"""Logging setup with daily log files and a caller-first line format."""

from __future__ import annotations

import logging
import os
import posixpath
import sys
import time
from datetime import date, timedelta
from pathlib import Path

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_AGE = timedelta(days=7)

_installed: list[logging.Handler] = []


def _go_dir(path: str) -> str:
    return posixpath.dirname(path) or "."


def _trim_package(pkg: str) -> str:
    if not pkg:
        return pkg
    parts = pkg.split("/")
    if len(parts) <= 2:
        return pkg
    return parts[-2] + "/" + parts[-1]


def _trim_leading_slash(text: str) -> str:
    return text[1:] if text.startswith("/") else text


def format_caller(function: str, file: str, line: int, project: str = "", project_dir: str = "") -> str:
    """Render the caller part of a log line, e.g. `` <pkg> file.py:3 |``."""

    def trim_project(value: str) -> str:
        prefix = project + "/"
        return value[len(prefix):] if value.startswith(prefix) else value

    is_main = function.startswith("main.")
    package = _trim_package(_go_dir(function))
    pieces = file.split(package) if package else list(file)
    if not is_main and len(pieces) > 1:
        return f" <{trim_project(_go_dir(function))}> {_trim_leading_slash(pieces[1])}:{line} |"

    root = "main" if is_main else _go_dir(function)
    prefix = project_dir + "/"
    if file.startswith(prefix):
        file = file[len(prefix):]
    return f" <{trim_project(root)}> {file}:{line} |"


class CallerFormatter(logging.Formatter):
    """Formats records as ``time <caller> file:line | [LEVL] message``."""

    def __init__(self, project: str = "", project_dir: str = "") -> None:
        super().__init__()
        self.project = project
        self.project_dir = project_dir

    def format(self, record: logging.LogRecord) -> str:
        stamp = time.strftime(TIMESTAMP_FORMAT, time.localtime(record.created))
        if record.name in ("", "root", "__main__"):
            function = f"main.{record.funcName}"
        else:
            function = record.name.replace(".", "/") + "." + record.funcName
        file = record.pathname.replace(os.sep, "/")
        caller = format_caller(function, file, record.lineno, self.project, self.project_dir)
        level = record.levelname.upper()[:4]
        message = record.getMessage()
        if record.exc_info:
            message = message + "\n" + self.formatException(record.exc_info)
        return f"{stamp}{caller} [{level}] {message}"


class _DailyFileHandler(logging.FileHandler):
    """Writes to ``background-YYYY-MM-DD.log`` and drops files past their age."""

    def __init__(self, directory: str | Path, max_age: timedelta = MAX_AGE) -> None:
        self._directory = Path(directory)
        self._directory.mkdir(parents=True, exist_ok=True)
        self._max_age = max_age
        self._day = date.today()
        super().__init__(self._path_for(self._day), encoding="utf-8")
        self._purge()

    def _path_for(self, day: date) -> Path:
        return self._directory / f"background-{day:%Y-%m-%d}.log"

    def _purge(self) -> None:
        cutoff = time.time() - self._max_age.total_seconds()
        current = Path(self.baseFilename)
        for path in self._directory.glob("background-*.log"):
            try:
                if path.resolve() != current.resolve() and path.stat().st_mtime < cutoff:
                    path.unlink()
            except OSError:
                continue

    def emit(self, record: logging.LogRecord) -> None:
        day = date.fromtimestamp(record.created)
        if day != self._day:
            if self.stream is not None:
                self.stream.close()
                self.stream = None
            self._day = day
            self.baseFilename = os.path.abspath(self._path_for(day))
            self._purge()
        super().emit(record)


def init_logger(base_path: str = "", level: int | str = logging.INFO) -> logging.Logger:
    """Send log records to daily files under ``base_path`` and to stdout."""
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"unknown log level: {level}")
        level = resolved

    root = logging.getLogger()
    for handler in _installed:
        root.removeHandler(handler)
        handler.close()
    _installed.clear()

    formatter = CallerFormatter()
    handlers: list[logging.Handler] = [
        _DailyFileHandler(base_path or "log"),
        logging.StreamHandler(sys.stdout),
    ]
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
        _installed.append(handler)
    root.setLevel(level)
    return root