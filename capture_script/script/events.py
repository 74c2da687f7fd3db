"""Structural YAML events and the walker the script parser pulls them from."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Optional, TextIO

import yaml

from .errors import MalformedDocument, UnexpectedEvent


class EventKind(Enum):
    """Event kinds; the value is the name used in diagnostics."""

    STREAM_START = 'stream-start'
    STREAM_END = 'stream-end'
    DOCUMENT_START = 'document-start'
    DOCUMENT_END = 'document-end'
    ALIAS = 'alias'
    SCALAR = 'scalar'
    SEQUENCE_START = 'sequence-start'
    SEQUENCE_END = 'sequence-end'
    MAPPING_START = 'mapping-start'
    MAPPING_END = 'mapping-end'


@dataclass(frozen=True)
class Event:
    """One structural event; `value` is only set for scalars."""

    kind: EventKind
    line: int = 0
    column: int = 0
    value: Optional[str] = None


_YAML_EVENT_KINDS = (
    (yaml.StreamStartEvent, EventKind.STREAM_START),
    (yaml.StreamEndEvent, EventKind.STREAM_END),
    (yaml.DocumentStartEvent, EventKind.DOCUMENT_START),
    (yaml.DocumentEndEvent, EventKind.DOCUMENT_END),
    (yaml.AliasEvent, EventKind.ALIAS),
    (yaml.ScalarEvent, EventKind.SCALAR),
    (yaml.SequenceStartEvent, EventKind.SEQUENCE_START),
    (yaml.SequenceEndEvent, EventKind.SEQUENCE_END),
    (yaml.MappingStartEvent, EventKind.MAPPING_START),
    (yaml.MappingEndEvent, EventKind.MAPPING_END),
)


def yaml_events(stream: TextIO | str) -> Iterator[Event]:
    """Translate PyYAML parse events into Event records.

    Tokenizer failures surface as yaml.YAMLError when the iterator is
    advanced; EventWalker turns them into MalformedDocument.
    """

    for raw in yaml.parse(stream, Loader=yaml.SafeLoader):
        yield _convert(raw)


def _convert(raw: yaml.Event) -> Event:
    mark = raw.start_mark
    line = mark.line if mark is not None else 0
    column = mark.column if mark is not None else 0
    for cls, kind in _YAML_EVENT_KINDS:
        if isinstance(raw, cls):
            value = raw.value if kind is EventKind.SCALAR else None
            return Event(kind=kind, line=line, column=column, value=value)
    raise MalformedDocument(f"Unsupported YAML event {type(raw).__name__}", line=line, column=column)


class EventWalker:
    """Pull events one at a time, optionally asserting their kind."""

    def __init__(self, events: Iterable[Event]) -> None:
        self._events = iter(events)
        self._last: Optional[Event] = None

    def next(self, expected: Optional[EventKind] = None) -> Event:
        try:
            event = next(self._events)
        except StopIteration:
            line, column = self._last_position()
            raise MalformedDocument('Unexpected end of event stream', line=line, column=column) from None
        except yaml.MarkedYAMLError as exc:
            mark = exc.problem_mark or exc.context_mark
            raise MalformedDocument(
                _describe_yaml_error(exc),
                line=mark.line if mark is not None else None,
                column=mark.column if mark is not None else None,
            ) from exc
        except yaml.YAMLError as exc:
            raise MalformedDocument(str(exc)) from exc

        self._last = event
        if expected is not None:
            check_event(event, expected)
        return event

    @staticmethod
    def scalar_text(event: Event) -> str:
        if event.kind is not EventKind.SCALAR or event.value is None:
            raise TypeError(f"scalar_text() called on a {event.kind.value} event")
        return event.value

    def _last_position(self) -> tuple[Optional[int], Optional[int]]:
        if self._last is None:
            return None, None
        return self._last.line, self._last.column


def check_event(event: Event, expected: EventKind) -> None:
    if event.kind is not expected:
        raise UnexpectedEvent(
            line=event.line,
            column=event.column,
            expected=expected.value,
            actual=event.kind.value,
        )


def _describe_yaml_error(exc: yaml.MarkedYAMLError) -> str:
    parts = [part for part in (exc.context, exc.problem) if part]
    return '; '.join(parts) if parts else 'Malformed YAML document'
