"""Control catalogs: the built-in control set and YAML catalog files."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, List

import yaml

from ..models.controls import ControlId, ControlType, parse_control_type

DEFAULT_CONTROLS: List[ControlId] = [
    ControlId(1, 'AeEnable', ControlType.BOOL),
    ControlId(2, 'AeLocked', ControlType.BOOL),
    ControlId(3, 'AeMeteringMode', ControlType.INTEGER32),
    ControlId(4, 'AeConstraintMode', ControlType.INTEGER32),
    ControlId(5, 'AeExposureMode', ControlType.INTEGER32),
    ControlId(6, 'ExposureValue', ControlType.FLOAT),
    ControlId(7, 'ExposureTime', ControlType.INTEGER32),
    ControlId(8, 'AnalogueGain', ControlType.FLOAT),
    ControlId(9, 'Brightness', ControlType.FLOAT),
    ControlId(10, 'Contrast', ControlType.FLOAT),
    ControlId(11, 'Lux', ControlType.FLOAT),
    ControlId(12, 'AwbEnable', ControlType.BOOL),
    ControlId(13, 'AwbMode', ControlType.INTEGER32),
    ControlId(14, 'AwbLocked', ControlType.BOOL),
    ControlId(17, 'ColourTemperature', ControlType.INTEGER32),
    ControlId(18, 'Saturation', ControlType.FLOAT),
    ControlId(20, 'Sharpness', ControlType.FLOAT),
    ControlId(22, 'ScalerCrop', ControlType.RECTANGLE),
    ControlId(23, 'DigitalGain', ControlType.FLOAT),
    ControlId(24, 'FrameDuration', ControlType.INTEGER64),
    ControlId(26, 'SensorTimestamp', ControlType.INTEGER64),
    ControlId(27, 'AfMode', ControlType.INTEGER32),
    ControlId(28, 'AfRange', ControlType.INTEGER32),
    ControlId(29, 'AfSpeed', ControlType.INTEGER32),
    ControlId(33, 'AfTrigger', ControlType.INTEGER32),
    ControlId(36, 'LensPosition', ControlType.FLOAT),
    ControlId(40, 'TestPatternMode', ControlType.INTEGER32),
    ControlId(41, 'SceneMode', ControlType.BYTE),
    ControlId(42, 'PipelineName', ControlType.STRING),
    ControlId(43, 'OutputSize', ControlType.SIZE),
]


def default_controls() -> List[ControlId]:
    return list(DEFAULT_CONTROLS)


def load_control_catalog(path: Path) -> List[ControlId]:
    """Load a catalog of the form ``controls: {Name: {id: N, type: int32}}``."""

    try:
        with path.open('r', encoding='utf-8') as handle:
            data = yaml.safe_load(handle)
    except yaml.YAMLError as exc:
        raise ValueError(f"Failed to parse control catalog at {path}: {exc}") from exc

    if not isinstance(data, dict) or not isinstance(data.get('controls'), dict):
        raise ValueError(f"Control catalog {path} must contain a 'controls' mapping")

    catalog: List[ControlId] = []
    seen_ids: Dict[int, str] = {}
    for name, entry in data['controls'].items():
        if not isinstance(entry, dict):
            raise ValueError(f"Control '{name}' in {path} must be a mapping")
        try:
            control_id = int(entry['id'])
            control_type = parse_control_type(str(entry.get('type', 'none')))
        except KeyError:
            raise ValueError(f"Control '{name}' in {path} missing 'id'") from None
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Control '{name}' in {path}: {exc}") from exc
        if control_id in seen_ids:
            raise ValueError(
                f"Control '{name}' in {path} reuses id {control_id} of '{seen_ids[control_id]}'"
            )
        seen_ids[control_id] = str(name)
        catalog.append(ControlId(control_id, str(name), control_type))
    return catalog
