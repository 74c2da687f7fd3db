"""Control descriptors, typed values and per-frame control sets."""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple, Union


class ControlType(IntEnum):
    """Declared type tag of a control."""

    NONE = 0
    BOOL = 1
    BYTE = 2
    INTEGER32 = 3
    INTEGER64 = 4
    FLOAT = 5
    STRING = 6
    RECTANGLE = 7
    SIZE = 8


CONTROL_TYPE_NAMES: Mapping[int, str] = MappingProxyType(
    {
        ControlType.NONE: 'none',
        ControlType.BOOL: 'bool',
        ControlType.BYTE: 'byte',
        ControlType.INTEGER32: 'int32',
        ControlType.INTEGER64: 'int64',
        ControlType.FLOAT: 'float',
        ControlType.STRING: 'string',
        ControlType.RECTANGLE: 'Rectangle',
        ControlType.SIZE: 'Size',
    }
)


def control_type_name(control_type: int) -> str:
    """Human readable name used in diagnostics."""

    return CONTROL_TYPE_NAMES.get(control_type, 'unknown')


def parse_control_type(name: str) -> ControlType:
    """Map a type name (as printed by control_type_name) back to its tag."""

    lowered = name.strip().lower()
    for tag, label in CONTROL_TYPE_NAMES.items():
        if label.lower() == lowered:
            return ControlType(tag)
    raise ValueError(f"Unknown control type '{name}'")


@dataclass(frozen=True)
class ControlId:
    """Descriptor of a single device control."""

    id: int
    name: str
    type: ControlType


@dataclass(frozen=True)
class ControlValue:
    """Immutable tagged value; `value` is None for the none variant."""

    type: ControlType = ControlType.NONE
    value: Any = None

    @classmethod
    def none(cls) -> 'ControlValue':
        return cls()

    @property
    def is_none(self) -> bool:
        return self.type == ControlType.NONE


ControlKey = Union[ControlId, int, str]


class ControlList:
    """Controls to apply to a single frame, keyed by numeric control id.

    Setting a control that is already present replaces its value.  Once
    frozen the list rejects further updates.
    """

    def __init__(self) -> None:
        self._values: Dict[int, Tuple[ControlId, ControlValue]] = {}
        self._frozen = False

    def set(self, control: ControlId, value: ControlValue) -> None:
        if self._frozen:
            raise RuntimeError('ControlList is read-only')
        self._values[control.id] = (control, value)

    def freeze(self) -> 'ControlList':
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, key: ControlKey) -> Optional[ControlValue]:
        entry = self._find(key)
        return entry[1] if entry is not None else None

    def __getitem__(self, key: ControlKey) -> ControlValue:
        entry = self._find(key)
        if entry is None:
            raise KeyError(key)
        return entry[1]

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, (ControlId, int, str)):
            return False
        return self._find(key) is not None

    def __iter__(self) -> Iterator[Tuple[ControlId, ControlValue]]:
        return iter(list(self._values.values()))

    def __len__(self) -> int:
        return len(self._values)

    def __bool__(self) -> bool:
        return bool(self._values)

    def __repr__(self) -> str:
        items = ', '.join(f'{ctrl.name}={val.value!r}' for ctrl, val in self._values.values())
        return f'ControlList({items})'

    def as_dict(self) -> Dict[str, Any]:
        """Plain name -> payload view, handy for logging and assertions."""

        return {ctrl.name: val.value for ctrl, val in self._values.values()}

    def _find(self, key: ControlKey) -> Optional[Tuple[ControlId, ControlValue]]:
        if isinstance(key, ControlId):
            return self._values.get(key.id)
        if isinstance(key, str):
            for entry in self._values.values():
                if entry[0].name == key:
                    return entry
            return None
        return self._values.get(key)
