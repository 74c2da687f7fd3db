"""Exceptions raised while loading a capture script."""
from __future__ import annotations

from typing import Optional


class CaptureScriptError(Exception):
    """Base class for every fatal capture script failure."""

    def __init__(self, message: str, *, line: Optional[int] = None, column: Optional[int] = None) -> None:
        self.message = message
        self.line = line
        self.column = column
        super().__init__(self._render())

    def _render(self) -> str:
        if self.line is None or self.column is None:
            return self.message
        return f"Capture script error on line {self.line} column {self.column}: {self.message}"


class ScriptIOError(CaptureScriptError):
    """The script file could not be opened or read."""


class MalformedDocument(CaptureScriptError):
    """The YAML tokenizer rejected the document."""


class UnexpectedEvent(CaptureScriptError):
    """A structural event of the wrong kind was found."""

    def __init__(self, *, line: int, column: int, expected: str, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected {expected} event, got {actual}", line=line, column=column)


class EmptyScalar(CaptureScriptError):
    """A control name or value was given as an empty scalar."""


class UnsupportedSection(CaptureScriptError):
    """A top-level section other than `frames` was found."""

    def __init__(self, section: str, *, line: Optional[int] = None, column: Optional[int] = None) -> None:
        self.section = section
        super().__init__(f"Unsupported section '{section}'", line=line, column=column)


class UnsupportedControl(CaptureScriptError):
    """A control name is not exposed by the camera."""

    def __init__(self, name: str, *, line: Optional[int] = None, column: Optional[int] = None) -> None:
        self.name = name
        super().__init__(f"Unsupported control '{name}'", line=line, column=column)


class InvalidFrameNumber(CaptureScriptError):
    """A frame key is not a plain non-negative integer (strict mode only)."""

    def __init__(self, text: str, *, line: Optional[int] = None, column: Optional[int] = None) -> None:
        self.text = text
        super().__init__(f"Invalid frame number '{text}'", line=line, column=column)
