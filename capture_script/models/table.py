"""Frame number -> control set lookup table."""
from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional

from .controls import ControlList


class FrameControlTable:
    """Read-only mapping from frame number to the controls queued with it.

    The table freezes every entry it is given; lookups of unknown frames
    return a fresh empty ControlList instead of failing.
    """

    def __init__(self, entries: Optional[Mapping[int, ControlList]] = None) -> None:
        frozen: Dict[int, ControlList] = {}
        for frame, controls in (entries or {}).items():
            frozen[int(frame)] = controls.freeze()
        self._entries: Mapping[int, ControlList] = MappingProxyType(frozen)

    def lookup(self, frame: int) -> ControlList:
        controls = self._entries.get(frame)
        if controls is None:
            return ControlList().freeze()
        return controls

    @property
    def frames(self) -> Mapping[int, ControlList]:
        return self._entries

    def __contains__(self, frame: object) -> bool:
        return frame in self._entries

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f'FrameControlTable(frames={sorted(self._entries)})'
