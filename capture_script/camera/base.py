"""Minimal camera abstraction consumed by capture scripts."""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, List, Sequence

from ..models.controls import ControlId, ControlList

logger = logging.getLogger(__name__)


class Camera(ABC):
    """A device exposing a catalog of controls and accepting capture requests."""

    @property
    @abstractmethod
    def id(self) -> str: ...

    @abstractmethod
    def controls(self) -> Iterable[ControlId]: ...

    @abstractmethod
    def queue_request(self, frame: int, controls: ControlList) -> None: ...


@dataclass(frozen=True)
class QueuedRequest:
    """Record of a request handed to a VirtualCamera."""

    frame: int
    controls: ControlList


class VirtualCamera(Camera):
    """In-memory camera that only records what it is asked to capture."""

    def __init__(self, controls: Sequence[ControlId], camera_id: str = 'virtual') -> None:
        names = [control.name for control in controls]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate control names: {', '.join(duplicates)}")
        self._id = camera_id
        self._controls = list(controls)
        self.requests: List[QueuedRequest] = []

    @property
    def id(self) -> str:
        return self._id

    def controls(self) -> List[ControlId]:
        return list(self._controls)

    def queue_request(self, frame: int, controls: ControlList) -> None:
        logger.debug('Camera %s queued frame %d with %d control(s)', self._id, frame, len(controls))
        self.requests.append(QueuedRequest(frame=frame, controls=controls))
