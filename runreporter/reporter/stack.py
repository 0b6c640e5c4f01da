"""Stack trace helpers for attempt errors."""

from __future__ import annotations

import re

# V8 ("    at fn (file:1:2)") and Gecko/WebKit ("fn@file:1:2") frame lines.
_STACK_LINE = re.compile(r"^\s*at\s.*:\d+:\d+\)?\s*$|^\s*[^\s@]*@\S+:\d+:\d+\s*$")


def split_stack(stack: str) -> tuple[list[str], list[str]]:
    """Split a stack into its leading message lines and its frame lines."""
    message: list[str] = []
    frames: list[str] = []
    for line in stack.split("\n"):
        if frames or _STACK_LINE.match(line):
            frames.append(line)
        else:
            message.append(line)
    return message, frames


def stack_without_message(stack: str) -> str:
    """Drop the ``AssertionError: ...`` style prefix, keeping only frames."""
    _, frames = split_stack(stack)
    return "\n".join(frames)
