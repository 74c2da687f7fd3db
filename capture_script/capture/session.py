"""Capture loop that applies scripted controls to each queued request."""
from __future__ import annotations

import logging
from typing import Iterator, List, Optional, Tuple

from ..camera.base import Camera
from ..models.controls import ControlList
from ..script.loader import CaptureScript

logger = logging.getLogger(__name__)


class CaptureSession:
    """Queue `frames` requests on `camera`, numbering them from 0.

    When a script is attached, each request carries the controls the script
    lists for its index; otherwise requests carry no controls.
    """

    def __init__(self, camera: Camera, script: Optional[CaptureScript], frames: int) -> None:
        if frames < 0:
            raise ValueError('frames must be >= 0')
        self.camera = camera
        self.script = script
        self.frames = frames
        self.queue_count = 0

    def requests(self) -> Iterator[Tuple[int, ControlList]]:
        """Yield (frame, controls) pairs without queueing anything."""

        for frame in range(self.frames):
            yield frame, self._controls_for(frame)

    def run(self) -> List[int]:
        """Queue every request; returns the frames that carried controls."""

        scripted: List[int] = []
        for frame, controls in self.requests():
            self.camera.queue_request(frame, controls)
            self.queue_count += 1
            if controls:
                scripted.append(frame)
                logger.info('Frame %d: %s', frame, _describe(controls))
        logger.info(
            'Queued %d request(s) on %s, %d with scripted controls',
            self.queue_count,
            self.camera.id,
            len(scripted),
        )
        return scripted

    def _controls_for(self, frame: int) -> ControlList:
        if self.script is None:
            return ControlList().freeze()
        return self.script.frame_controls(frame)


def _describe(controls: ControlList) -> str:
    return ', '.join(f'{name}={value!r}' for name, value in controls.as_dict().items())
