"""Configuration dataclasses for capture scripts."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class ScriptConfig:
    """Controls how capture scripts are parsed."""

    strict_frame_numbers: bool = False


@dataclass(frozen=True)
class SessionConfig:
    """High-level knobs for a scripted capture run."""

    script: Path
    frames: int = 0
    catalog: Optional[Path] = None
    script_options: ScriptConfig = field(default_factory=ScriptConfig)
