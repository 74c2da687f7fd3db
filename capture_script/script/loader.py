"""CaptureScript: load a script file against a camera's control catalog."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional

from ..camera.base import Camera
from ..config.schema import ScriptConfig
from ..models.controls import ControlId, ControlList
from ..models.table import FrameControlTable
from .errors import CaptureScriptError, ScriptIOError
from .events import yaml_events
from .parser import ScriptParser

logger = logging.getLogger(__name__)


class CaptureScript:
    """Per-frame controls read from a capture script.

    Construction never raises for script problems: failures are logged and
    leave the script invalid, in which case every frame has no controls.
    """

    def __init__(self, camera: Camera, path: Path, config: Optional[ScriptConfig] = None) -> None:
        self.camera = camera
        self.path = Path(path)
        self.config = config or ScriptConfig()
        self.error: Optional[CaptureScriptError] = None
        self._table = FrameControlTable()

        # Map the camera's controls by name so the script can refer to them.
        self._controls: Dict[str, ControlId] = {control.name: control for control in camera.controls()}

        try:
            table = self._load()
        except CaptureScriptError as exc:
            self.error = exc
            logger.error('%s', exc)
            return

        self._table = table
        logger.info('Loaded capture script %s (%d frame(s))', self.path.name, len(table))

    @property
    def valid(self) -> bool:
        return self.error is None

    @property
    def table(self) -> FrameControlTable:
        return self._table

    def frame_controls(self, frame: int) -> ControlList:
        """Controls scripted for `frame`; empty when the frame isn't listed."""

        return self._table.lookup(frame)

    def _load(self) -> FrameControlTable:
        try:
            handle = self.path.open('r', encoding='utf-8')
        except OSError as exc:
            raise ScriptIOError(f"Failed to open capture script {self.path}: {exc.strerror or exc}") from exc

        with handle:
            try:
                return ScriptParser(self._controls, self.config).parse(yaml_events(handle))
            except UnicodeDecodeError as exc:
                raise ScriptIOError(f"Failed to read capture script {self.path}: {exc}") from exc
