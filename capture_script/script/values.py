"""Decode textual control values according to the control's declared type."""
from __future__ import annotations

import logging
import math
import re
import struct
from typing import Callable, Dict, Optional

from ..models.controls import ControlId, ControlType, ControlValue, control_type_name

logger = logging.getLogger(__name__)

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1

_INT_PREFIX_RE = re.compile(r'[ \t\n\r\f\v]*([+-]?\d+)', re.ASCII)
_FLOAT_PREFIX_RE = re.compile(
    r'[ \t\n\r\f\v]*('
    r'[+-]?0[xX](?:[0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)(?:[pP][+-]?\d+)?'
    r'|[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?'
    r'|[+-]?(?:infinity|inf|nan)'
    r')',
    re.IGNORECASE | re.ASCII,
)
_HEX_FLOAT_RE = re.compile(r'([+-]?)0[xX]([0-9a-fA-F]*)\.?([0-9a-fA-F]*)(?:[pP]([+-]?\d+))?$')


def parse_c_long(text: str) -> int:
    """strtol(text, NULL, 10) on an LP64 platform.

    Leading whitespace and an optional sign are accepted, trailing garbage
    is ignored, no digits yields 0 and out-of-range values saturate.
    """

    match = _INT_PREFIX_RE.match(text)
    if not match:
        return 0
    value = int(match.group(1))
    return max(INT64_MIN, min(INT64_MAX, value))


def wrap_signed(value: int, bits: int) -> int:
    """Keep the low `bits` of value, interpreted as two's complement."""

    mask = (1 << bits) - 1
    value &= mask
    if value >= 1 << (bits - 1):
        value -= 1 << bits
    return value


def wrap_unsigned(value: int, bits: int) -> int:
    return value & ((1 << bits) - 1)


def parse_c_float(text: str) -> float:
    """strtof(text, NULL): longest float prefix, 0.0 when there is none."""

    match = _FLOAT_PREFIX_RE.match(text)
    if not match:
        return 0.0
    literal = match.group(1)
    if literal.lstrip('+-')[:2].lower() == '0x':
        value = _parse_hex_float(literal)
    else:
        value = float(literal)
    return to_float32(value)


def to_float32(value: float) -> float:
    """Round a double to the nearest single precision value."""

    try:
        return struct.unpack('<f', struct.pack('<f', value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def _parse_hex_float(literal: str) -> float:
    match = _HEX_FLOAT_RE.match(literal)
    if not match:
        return 0.0
    sign, whole, frac, exponent = match.groups()
    mantissa = int(whole + frac, 16) if (whole or frac) else 0
    exp = int(exponent) if exponent else 0
    try:
        value = math.ldexp(float(mantissa), exp - 4 * len(frac))
    except OverflowError:
        value = math.inf
    return -value if sign == '-' else value


def _unpack_none(repr_: str) -> Optional[ControlValue]:
    return ControlValue.none()


def _unpack_bool(repr_: str) -> Optional[ControlValue]:
    if repr_ == 'true':
        return ControlValue(ControlType.BOOL, True)
    if repr_ == 'false':
        return ControlValue(ControlType.BOOL, False)
    return None


def _unpack_byte(repr_: str) -> Optional[ControlValue]:
    return ControlValue(ControlType.BYTE, wrap_unsigned(parse_c_long(repr_), 8))


def _unpack_int32(repr_: str) -> Optional[ControlValue]:
    return ControlValue(ControlType.INTEGER32, wrap_signed(parse_c_long(repr_), 32))


def _unpack_int64(repr_: str) -> Optional[ControlValue]:
    return ControlValue(ControlType.INTEGER64, parse_c_long(repr_))


def _unpack_float(repr_: str) -> Optional[ControlValue]:
    return ControlValue(ControlType.FLOAT, parse_c_float(repr_))


def _unpack_string(repr_: str) -> Optional[ControlValue]:
    return ControlValue(ControlType.STRING, repr_)


def _unpack_unimplemented(repr_: str) -> Optional[ControlValue]:
    # Rectangle and Size values are not parsed yet; callers receive none.
    return ControlValue.none()


_UNPACKERS: Dict[ControlType, Callable[[str], Optional[ControlValue]]] = {
    ControlType.NONE: _unpack_none,
    ControlType.BOOL: _unpack_bool,
    ControlType.BYTE: _unpack_byte,
    ControlType.INTEGER32: _unpack_int32,
    ControlType.INTEGER64: _unpack_int64,
    ControlType.FLOAT: _unpack_float,
    ControlType.STRING: _unpack_string,
    ControlType.RECTANGLE: _unpack_unimplemented,
    ControlType.SIZE: _unpack_unimplemented,
}

_missing = set(ControlType) - set(_UNPACKERS)
if _missing:
    raise ImportError(f"No value decoder for control types: {sorted(t.name for t in _missing)}")


def unpack_control(control: ControlId, repr_: str) -> ControlValue:
    """Decode `repr_` for `control`, degrading to a none value on failure."""

    unpacker = _UNPACKERS.get(control.type)
    value = unpacker(repr_) if unpacker is not None else None
    if value is None:
        unpack_failure(control, repr_)
        return ControlValue.none()
    return value


def unpack_failure(control: ControlId, repr_: str) -> None:
    logger.warning(
        "Unsupported value '%s' for %s control %s",
        repr_,
        control_type_name(control.type),
        control.name,
    )
