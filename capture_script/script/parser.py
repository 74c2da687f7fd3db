"""Capture script grammar.

A script is a single YAML mapping whose only supported section is
`frames`, a sequence of one-key mappings from frame number to a mapping of
control name -> value::

    frames:
      - 10:
          AeEnable: "false"
          ExposureTime: "3000"
      - 20:
          AnalogueGain: "1.5"

The parser walks the event stream strictly in order and never looks ahead.
Any structural or catalog failure raises and discards everything parsed so
far; malformed control values only degrade to a none value.
"""
from __future__ import annotations

import logging
import re
from typing import Dict, Iterable, Mapping, Optional

from ..config.schema import ScriptConfig
from ..models.controls import ControlId, ControlList
from ..models.table import FrameControlTable
from .errors import EmptyScalar, InvalidFrameNumber, UnsupportedControl, UnsupportedSection
from .events import Event, EventKind, EventWalker, check_event
from .values import parse_c_long, unpack_control, wrap_unsigned

logger = logging.getLogger(__name__)

FRAMES_SECTION = 'frames'
_STRICT_FRAME_RE = re.compile(r'\d+')


class ScriptParser:
    """Build a FrameControlTable from a stream of structural events."""

    def __init__(
        self,
        controls: Mapping[str, ControlId],
        config: Optional[ScriptConfig] = None,
    ) -> None:
        self._controls = controls
        self._config = config or ScriptConfig()

    def parse(self, events: Iterable[Event]) -> FrameControlTable:
        walker = EventWalker(events)
        frames: Dict[int, ControlList] = {}

        walker.next(EventKind.STREAM_START)
        walker.next(EventKind.DOCUMENT_START)
        walker.next(EventKind.MAPPING_START)

        while True:
            event = walker.next()
            if event.kind is EventKind.MAPPING_END:
                break

            check_event(event, EventKind.SCALAR)
            section = walker.scalar_text(event)
            if section != FRAMES_SECTION:
                raise UnsupportedSection(section, line=event.line, column=event.column)
            self._parse_frames(walker, frames)

        return FrameControlTable(frames)

    def _parse_frames(self, walker: EventWalker, frames: Dict[int, ControlList]) -> None:
        walker.next(EventKind.SEQUENCE_START)

        while True:
            event = walker.next()
            if event.kind is EventKind.SEQUENCE_END:
                return
            self._parse_frame(walker, event, frames)

    def _parse_frame(self, walker: EventWalker, event: Event, frames: Dict[int, ControlList]) -> None:
        check_event(event, EventKind.MAPPING_START)

        key_event = walker.next(EventKind.SCALAR)
        frame = self._frame_number(key_event)

        walker.next(EventKind.MAPPING_START)

        controls = ControlList()
        while True:
            event = walker.next()
            if event.kind is EventKind.MAPPING_END:
                break
            self._parse_control(walker, event, controls)

        walker.next(EventKind.MAPPING_END)

        if frame in frames:
            logger.debug('Frame %d redefined on line %d; replacing earlier controls', frame, key_event.line)
        frames[frame] = controls

    def _parse_control(self, walker: EventWalker, event: Event, controls: ControlList) -> None:
        check_event(event, EventKind.SCALAR)
        name = walker.scalar_text(event)
        if not name:
            raise EmptyScalar('Empty control name', line=event.line, column=event.column)

        control = self._controls.get(name)
        if control is None:
            raise UnsupportedControl(name, line=event.line, column=event.column)

        value_event = walker.next(EventKind.SCALAR)
        repr_ = walker.scalar_text(value_event)
        if not repr_:
            raise EmptyScalar(
                f"Empty value for control '{name}'",
                line=value_event.line,
                column=value_event.column,
            )

        controls.set(control, unpack_control(control, repr_))

    def _frame_number(self, event: Event) -> int:
        text = EventWalker.scalar_text(event)
        if self._config.strict_frame_numbers:
            if not _STRICT_FRAME_RE.fullmatch(text):
                raise InvalidFrameNumber(text, line=event.line, column=event.column)
            return int(text)
        # atoi() semantics stored into an unsigned int: non-numeric text is
        # frame 0 and negative numbers wrap around.
        return wrap_unsigned(parse_c_long(text), 32)


def parse_events(
    events: Iterable[Event],
    controls: Mapping[str, ControlId],
    config: Optional[ScriptConfig] = None,
) -> FrameControlTable:
    """Convenience wrapper around ScriptParser.parse."""

    return ScriptParser(controls, config).parse(events)
