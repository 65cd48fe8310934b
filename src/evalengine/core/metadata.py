"""
Execution metadata extraction.

Normalizes the arguments and result of an LLM-calling function into an
ExecutionMetadata record. Result shapes are unknown ahead of time (plain
strings, provider SDK objects, OpenAI-style dict completions), so every
extractor walks an ordered fallback chain and never raises.
"""

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

_MISSING = object()


@dataclass(frozen=True)
class ExecutionMetadata:
    """
    Normalized record of one invocation.

    Attributes:
        input: Logical input (first positional argument when present)
        output: Extracted response text
        response_time: Wall-clock duration of the call in milliseconds
        tools_called: Tool names in call order
        prompt: Extracted prompt text used for substring matching
    """

    input: Any
    output: Any
    response_time: float = 0.0
    tools_called: tuple[str, ...] = ()
    prompt: str = ""

    def __post_init__(self) -> None:
        if self.response_time < 0:
            raise ValueError("response_time must be non-negative")
        if not isinstance(self.tools_called, tuple):
            object.__setattr__(self, "tools_called", tuple(self.tools_called))


@dataclass(frozen=True)
class CallArguments:
    """Positional and keyword arguments of one call."""

    args: tuple[Any, ...] = ()
    kwargs: dict[str, Any] = field(default_factory=dict)

    @property
    def first(self) -> Any:
        return self.args[0] if self.args else _MISSING

    def all_values(self) -> list[Any]:
        return [*self.args, *self.kwargs.values()]


def _get(obj: Any, name: str, default: Any = None) -> Any:
    """Read a field from a mapping key or an attribute."""
    if obj is None:
        return default
    if isinstance(obj, Mapping):
        return obj.get(name, default)
    try:
        return getattr(obj, name, default)
    except Exception:
        return default


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, str | bytes | bytearray)


def _to_json(value: Any) -> str:
    try:
        return json.dumps(value, default=_json_default, sort_keys=True, ensure_ascii=False)
    except (TypeError, ValueError):
        return repr(value)


def _json_default(value: Any) -> Any:
    model_dump = getattr(value, "model_dump", None)
    if callable(model_dump):
        return model_dump()
    if hasattr(value, "__dict__"):
        return vars(value)
    return str(value)


def extract_prompt(call: CallArguments) -> str:
    """Extract the prompt text from call arguments."""
    first = call.first
    if isinstance(first, str):
        return first

    if first is not _MISSING and first is not None:
        prompt = _get(first, "prompt")
        if prompt:
            return prompt if isinstance(prompt, str) else _to_json(prompt)

        messages = _get(first, "messages")
        if _is_sequence(messages):
            parts = []
            for message in messages:
                content = _get(message, "content") or _get(message, "text") or ""
                parts.append(content if isinstance(content, str) else _to_json(content))
            return " ".join(parts)

    return " ".join(
        value if isinstance(value, str) else _to_json(value) for value in call.all_values()
    )


def extract_response(result: Any) -> str:
    """Extract the response text from a call result."""
    if not result:
        return ""
    if isinstance(result, str):
        return result

    for name in ("text", "content"):
        value = _get(result, name)
        if value:
            return value if isinstance(value, str) else _to_json(value)

    choices = _get(result, "choices")
    if _is_sequence(choices) and len(choices) > 0:
        choice = choices[0]
        message_content = _get(_get(choice, "message"), "content")
        if message_content:
            return message_content
        choice_text = _get(choice, "text")
        if choice_text:
            return choice_text

    return _to_json(result)


def extract_tools_called(result: Any) -> tuple[str, ...]:
    """
    Extract tool names from a call result, preserving call order.

    Duplicates are kept: a tool invoked twice appears twice.
    """
    if not result or isinstance(result, str):
        return ()

    for name in ("tool_calls", "toolCalls"):
        calls = _get(result, name)
        if _is_sequence(calls):
            names = (
                _get(call, "toolName") or _get(call, "tool_name") or _get(call, "name")
                for call in calls
            )
            return tuple(n for n in names if n)

    choices = _get(result, "choices")
    if _is_sequence(choices):
        names = []
        for choice in choices:
            tool_calls = _get(_get(choice, "message"), "tool_calls") or []
            if not _is_sequence(tool_calls):
                continue
            for call in tool_calls:
                tool_name = _get(_get(call, "function"), "name")
                if tool_name:
                    names.append(tool_name)
        return tuple(names)

    return ()


def extract_metadata(
    args: tuple[Any, ...],
    kwargs: dict[str, Any] | None,
    result: Any,
    response_time: float,
) -> ExecutionMetadata:
    """
    Build ExecutionMetadata for one invocation.

    Args:
        args: Positional arguments passed to the wrapped function
        kwargs: Keyword arguments passed to the wrapped function
        result: Value returned by the wrapped function
        response_time: Measured duration in milliseconds

    Returns:
        Metadata with the logical input, extracted output and tool trace
    """
    call = CallArguments(args=tuple(args), kwargs=dict(kwargs or {}))
    first = call.first
    try:
        prompt = extract_prompt(call)
    except Exception:
        prompt = ""
    try:
        output = extract_response(result)
    except Exception:
        output = _to_json(result)
    try:
        tools = extract_tools_called(result)
    except Exception:
        tools = ()

    return ExecutionMetadata(
        input=prompt if first is _MISSING else first,
        output=output,
        response_time=max(0.0, float(response_time)),
        tools_called=tools,
        prompt=prompt,
    )
