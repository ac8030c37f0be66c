"""Errors that carry the location where they were wrapped."""

from __future__ import annotations

import inspect
from pathlib import PurePath


class StackError(Exception):
    """An error annotated with the source location that wrapped it."""

    def __init__(self, err: BaseException, function_info: str) -> None:
        super().__init__(err, function_info)
        self.err = err
        self.function_info = function_info

    def _root(self) -> "StackError":
        current = self
        while isinstance(current.err, StackError):
            current = current.err
        return current

    def origin_error(self) -> BaseException:
        """Return the innermost error that is not a ``StackError``."""
        return self._root().err

    def __str__(self) -> str:
        root = self._root()
        return f"===== STACK ERROR {root.function_info} =====\n{root.err}"


def _location(filename: str, module: str | None, line: int) -> str:
    path = PurePath(filename)
    if not module or module == "__main__":
        return f"{path.name}:{line}"
    depth = module.count(".") + 1
    if path.name == "__init__.py":
        depth += 1
    return "/".join(path.parts[-depth:]) + f":{line}"


def wrap_error(err: BaseException | None) -> StackError | None:
    """Wrap ``err`` with the caller's location; ``None`` passes through."""
    if err is None:
        return None
    frame = inspect.currentframe()
    caller = frame.f_back if frame is not None else None
    try:
        if caller is None:
            info = "main"
        else:
            module = inspect.getmodule(caller)
            module_name = module.__name__ if module is not None else None
            info = _location(caller.f_code.co_filename, module_name, caller.f_lineno)
    finally:
        del frame, caller
    return StackError(err, info)