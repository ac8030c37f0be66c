"""Request and response models for the chat completion API."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping


def _deep_equal(left: Any, right: Any) -> bool:
    """Compare two values without letting booleans stand in for numbers."""
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    return left == right


class Keyv(dict):
    """A string-keyed dictionary with typed lookups."""

    def get_keyv(self, key: str) -> "Keyv":
        """Return the mapping stored under ``key``, or an empty one.

        A plain dict found under ``key`` is replaced in place by a ``Keyv``
        holding the same items, so changes made through the result stay
        visible in this mapping.
        """
        value = self.get(key)
        if isinstance(value, Keyv):
            return value
        if isinstance(value, dict):
            wrapped = Keyv(value)
            self[key] = wrapped
            return wrapped
        return Keyv()

    def get_slice(self, key: str) -> list:
        """Return the list stored under ``key``, or an empty list."""
        value = self.get(key)
        return value if isinstance(value, list) else []

    def get_string(self, key: str) -> str:
        """Return the string stored under ``key``, or ``""``."""
        value = self.get(key)
        return value if isinstance(value, str) else ""

    def matches(self, key: str, value: Any) -> bool:
        """Tell whether ``key`` is present and holds ``value``."""
        return key in self and _deep_equal(self[key], value)

    def among(self, key: str, *args: Any) -> bool:
        """Tell whether ``key`` is present and holds one of ``args``."""
        if key not in self:
            return False
        current = self[key]
        return any(_deep_equal(current, candidate) for candidate in args)

    def is_string(self, key: str) -> bool:
        """Tell whether ``key`` is present and holds a string."""
        return isinstance(self.get(key), str)

    def __str__(self) -> str:
        return json.dumps(self, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def _take(data: Mapping[str, Any], key: str, kinds: tuple, default: Any) -> Any:
    value = data.get(key)
    if value is None:
        return default
    if isinstance(value, bool) and bool not in kinds:
        raise TypeError(f"field {key!r}: unexpected boolean")
    if not isinstance(value, kinds):
        raise TypeError(f"field {key!r}: unexpected {type(value).__name__}")
    return value


def _take_keyvs(data: Mapping[str, Any], key: str) -> list[Keyv]:
    items = _take(data, key, (list,), [])
    result = []
    for item in items:
        if not isinstance(item, dict):
            raise TypeError(f"field {key!r}: expected objects, got {type(item).__name__}")
        result.append(item if isinstance(item, Keyv) else Keyv(item))
    return result


def _require_mapping(data: Any) -> None:
    if not isinstance(data, Mapping):
        raise TypeError(f"expected a mapping, got {type(data).__name__}")


@dataclass
class ChatCompletion:
    """A chat completion request."""

    system: str = ""
    messages: list[Keyv] = field(default_factory=list)
    tools: list[Keyv] = field(default_factory=list)
    model: str = ""
    max_tokens: int = 0
    stop_sequences: list[str] = field(default_factory=list)
    temperature: float = 0.0
    top_k: int = 0
    top_p: float = 0.0
    stream: bool = False
    tool_choice: Any = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ChatCompletion":
        """Build a request from its decoded JSON body."""
        _require_mapping(data)
        stop = _take(data, "stop", (list,), [])
        if not all(isinstance(item, str) for item in stop):
            raise TypeError("field 'stop': expected strings")
        return cls(
            system=_take(data, "system", (str,), ""),
            messages=_take_keyvs(data, "messages"),
            tools=_take_keyvs(data, "tools"),
            model=_take(data, "model", (str,), ""),
            max_tokens=_take(data, "max_tokens", (int,), 0),
            stop_sequences=list(stop),
            temperature=float(_take(data, "temperature", (int, float), 0.0)),
            top_k=_take(data, "topK", (int,), 0),
            top_p=float(_take(data, "topP", (int, float), 0.0)),
            stream=_take(data, "stream", (bool,), False),
            tool_choice=data.get("tool_choice"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the request as a JSON-ready dictionary."""
        return {
            "system": self.system,
            "messages": list(self.messages),
            "tools": list(self.tools),
            "model": self.model,
            "max_tokens": self.max_tokens,
            "stop": list(self.stop_sequences),
            "temperature": self.temperature,
            "topK": self.top_k,
            "topP": self.top_p,
            "stream": self.stream,
            "tool_choice": self.tool_choice,
        }


@dataclass
class ChatGeneration:
    """An image generation request."""

    model: str = ""
    message: str = ""
    n: int = 0
    size: str = ""
    style: str = ""
    quality: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ChatGeneration":
        """Build a request from its decoded JSON body."""
        _require_mapping(data)
        return cls(
            model=_take(data, "model", (str,), ""),
            message=_take(data, "prompt", (str,), ""),
            n=_take(data, "n", (int,), 0),
            size=_take(data, "size", (str,), ""),
            style=_take(data, "style", (str,), ""),
            quality=_take(data, "quality", (str,), ""),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the request as a JSON-ready dictionary."""
        return {
            "model": self.model,
            "prompt": self.message,
            "n": self.n,
            "size": self.size,
            "style": self.style,
            "quality": self.quality,
        }


def _choice_body(body: Mapping[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key in ("role", "content", "tool_calls"):
        value = body.get(key)
        if value:
            result[key] = value
    return result


@dataclass
class ChatChoice:
    """One choice of a chat response; ``message`` or ``delta`` holds the body."""

    index: int = 0
    message: Keyv | None = None
    delta: Keyv | None = None
    finish_reason: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the choice as a JSON-ready dictionary."""
        result: dict[str, Any] = {"index": self.index}
        if self.message is not None:
            result["message"] = _choice_body(self.message)
        if self.delta is not None:
            result["delta"] = _choice_body(self.delta)
        result["finish_reason"] = self.finish_reason
        return result


@dataclass
class ChatResponse:
    """A chat completion response or stream chunk."""

    id: str = ""
    object: str = ""
    created: int = 0
    model: str = ""
    choices: list[ChatChoice] = field(default_factory=list)
    error: Keyv | None = None
    usage: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return the response as a JSON-ready dictionary."""
        result: dict[str, Any] = {
            "id": self.id,
            "object": self.object,
            "created": self.created,
            "model": self.model,
            "choices": [choice.to_dict() for choice in self.choices],
        }
        if self.error is not None:
            result["error"] = {
                "message": self.error.get("message", ""),
                "type": self.error.get("type", ""),
            }
        if self.usage:
            result["usage"] = dict(self.usage)
        return result