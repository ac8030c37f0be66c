"""Tool selection: resolving tool names and ids, parsing model replies into tool calls."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Sequence

from chatadapter.model import ChatCompletion, Keyv

MAX_MESSAGES = 20
NO_TOOL = "-1"

_CANCEL_MARKERS = (
    "<|tool|>",
    "<|assistant|>",
    "<|user|>",
    "<|system|>",
    "<|tool_response|>",
    "<|end|>",
    "USER: ",
    "ANSWER: ",
    "TOOL_RESPONSE: ",
)

log = logging.getLogger(__name__)


@dataclass
class ToolCall:
    """A tool chosen by the model, with its arguments as a JSON string."""

    name: str
    arguments: str = "{}"
    created: int = field(default_factory=lambda: int(time.time()))


def _kv(value: Mapping[str, Any] | None) -> Keyv:
    if isinstance(value, Keyv):
        return value
    return Keyv(value or {})


def _functions(tools: Iterable[Mapping[str, Any]]) -> Iterable[Keyv]:
    for tool in tools:
        yield _kv(tool).get_keyv("function")


def need_to_tool_call(tool_value: Mapping[str, Any], completion: ChatCompletion) -> bool:
    """Tell whether the request should go through tool selection."""
    settings = _kv(tool_value)
    if not settings.matches("enabled", True):
        return False

    tool = settings.get_string("id")
    if tool == NO_TOOL and settings.matches("tasks", True):
        tool = "tasks"

    if not completion.messages or not completion.tools:
        return False

    role = completion.messages[-1].get("role")
    return (role != "function" and role != "tool") or tool != NO_TOOL


def tool_call_cancel(text: str) -> bool:
    """Tell whether generated text contains a marker that ends a tool reply."""
    text = text.strip()
    return any(marker in text for marker in _CANCEL_MARKERS)


def tasks_enabled(tool_value: Mapping[str, Any], completion: ChatCompletion) -> bool:
    """Tell whether task decomposition is switched on for this request."""
    if completion.tool_choice not in ("", "auto"):
        return False
    return _kv(tool_value).matches("tasks", True)


def name_with_tools(name: str, tools: Sequence[Mapping[str, Any]]) -> str:
    """Return the tool name matching ``name`` by name or id, or ``"-1"``."""
    if name in ("", NO_TOOL) or not tools:
        return NO_TOOL
    for fn in _functions(tools):
        if "name" in fn and name == fn.get_string("name"):
            return name
        if "id" in fn and name == fn.get_string("id"):
            return fn.get_string("name")
    return NO_TOOL


def tool_id_with_tools(name: str, tools: Sequence[Mapping[str, Any]]) -> str:
    """Return the tool id matching ``name`` by name or id, or ``"-1"``."""
    value = name
    if not value or not tools:
        return NO_TOOL
    for fn in _functions(tools):
        if "id" in fn and value == fn.get_string("id"):
            return value
        if "name" in fn:
            if "id" in fn and value == fn.get_string("name"):
                return fn.get_string("id")
            value = fn.get_string("name")
            if name == value:
                if "id" in fn:
                    value = fn.get_string("id")
                return value
    return NO_TOOL


def name_with_tools_not_args(task: Mapping[str, str], tools: Sequence[Mapping[str, Any]]) -> tuple[str, str]:
    """Return the name of a tool for ``task`` that needs no arguments, and a query.

    A property whose description is ``"$"`` does not count as an argument; the
    task text is offered for it as a JSON object in the second element.
    Returns ``("-1", "")`` when no such tool exists.
    """
    task = _kv(task)
    value = task.get_string("toolId")
    if value in ("", NO_TOOL) or not tools:
        return NO_TOOL, ""

    query = ""

    def needs_arguments(properties: Keyv) -> bool:
        nonlocal query
        for key, prop in properties.items():
            if isinstance(prop, dict) and prop.get("description") == "$":
                text = json.dumps(task.get_string("task"), ensure_ascii=False)
                query = f'{{"{key}":{text}}}'
                continue
            return True
        return False

    def takes_arguments(fn: Keyv) -> bool:
        params = fn.get_keyv("parameters")
        return "properties" in params and needs_arguments(params.get_keyv("properties"))

    for fn in _functions(tools):
        if "name" in fn and value == fn.get_string("name"):
            if takes_arguments(fn):
                continue
            return value, query
        if "id" in fn and value == fn.get_string("id"):
            value = fn.get_string("name")
            if takes_arguments(fn):
                continue
            return value, query
    return NO_TOOL, ""


def tool_def(tool_id: str, tools: Sequence[Mapping[str, Any]]) -> str:
    """Return the id of the default tool named ``tool_id``, or ``"-1"``."""
    if tool_id == NO_TOOL:
        return tool_id
    for fn in _functions(tools):
        if "name" in fn and tool_id == fn.get_string("name"):
            return fn.get_string("id")
    return NO_TOOL


def extract_tool_names(messages: Sequence[Mapping[str, Any]]) -> list[str]:
    """Return the names of tools answered in the last messages of a chat."""
    recent = (_kv(message) for message in messages[-MAX_MESSAGES:])
    return [message.get_string("name") for message in recent if message.matches("role", "tool")]


def exclude_tasks(completion: ChatCompletion, tasks: Sequence[dict[str, str]]) -> None:
    """Mark each known task with ``exclude`` = ``"true"`` if its tool already ran."""
    if not tasks:
        return
    executed = extract_tool_names(completion.messages)
    for task in tasks:
        name = name_with_tools(task.get("toolId") or "", completion.tools)
        if name == NO_TOOL or "task" not in task:
            continue
        task["exclude"] = "true" if name in executed else "false"


def _extract_json(content: str, separator: str, opening: str, closing: str) -> str:
    for piece in content.split(separator):
        left = piece.find(opening)
        right = piece.rfind(closing)
        if left >= 0 and right > left:
            return piece[left : right + 1]
    return ""


def _string_map(item: Any) -> Keyv | None:
    if item is None:
        return None
    if not isinstance(item, dict):
        raise ValueError(f"expected an object, got {type(item).__name__}")
    result = Keyv()
    for key, value in item.items():
        if value is None:
            value = ""
        if not isinstance(value, str):
            raise ValueError(f"value of {key!r} is not a string")
        result[key] = value
    return result


def parse_tool_tasks(content: str, completion: ChatCompletion) -> list[Keyv]:
    """Parse the task list from a model reply, keeping tasks with known tools."""
    text = _extract_json(content, "1: ", "[", "]")
    if not text:
        log.error("no JSON task list found in reply")
        return []

    try:
        decoded = json.loads(text)
        if not isinstance(decoded, list):
            raise ValueError("task list is not an array")
        items = [_string_map(item) for item in decoded]
    except ValueError as exc:
        log.error(exc)
        return []

    tasks = []
    for task in items:
        if task is None or "toolId" not in task:
            continue
        name = name_with_tools(task.get_string("toolId"), completion.tools)
        if name == NO_TOOL or "task" not in task:
            continue
        task["toolId"] = name
        tasks.append(task)
    return tasks


def parse_tool_call(
    content: str,
    completion: ChatCompletion,
    default_id: str = NO_TOOL,
    exclude_names: Iterable[str] | None = None,
) -> ToolCall | None:
    """Parse a model reply into a tool call.

    Falls back to the default tool when the reply names no usable tool;
    returns ``None`` when there is neither.
    """
    created = int(time.time())
    fallback_name = name_with_tools(default_id, completion.tools)

    def fallback() -> ToolCall | None:
        if fallback_name != NO_TOOL:
            return ToolCall(fallback_name, "{}", created)
        log.info("tool call reply not understood:\n%s", content)
        return None

    text = _extract_json(content, "TOOL_RESPONSE", "{", "}")
    if not text:
        return fallback()

    name = ""
    fn = Keyv()
    for fn in _functions(completion.tools):
        candidate = fn.get_string("name")
        if fn.get_string("id") in text or candidate in text:
            name = candidate
            break
    if not name:
        return fallback()

    if exclude_names is not None and name in set(exclude_names):
        return ToolCall(fallback_name, "{}", created) if fallback_name != NO_TOOL else None

    try:
        decoded = json.loads(text)
        if not isinstance(decoded, dict):
            raise ValueError("tool call is not an object")
    except ValueError as exc:
        log.error(exc)
        return fallback()

    log.info("tool call reply:\n%s", text)
    reply = Keyv(decoded)
    if "arguments" in reply:
        arguments = reply["arguments"]
    elif "parameters" in reply and "parameters" not in fn.get_keyv("parameters").get_keyv("properties"):
        parameters = reply["parameters"]
        arguments = parameters if isinstance(parameters, dict) else None
    else:
        reply.pop("toolId", None)
        arguments = dict(reply)

    encoded = json.dumps(arguments, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return ToolCall(name, encoded, created)