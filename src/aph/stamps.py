# This file is part of the aph project
# https://github.com/mbarkhau/aph
#
# Copyright (c) 2019-2022 Manuel Barkhau (mbarkhau@gmail.com) - MIT License
# SPDX-License-Identifier: MIT
"""Parsing of time and memory stamps.

A stamp is a number followed by a unit, eg. "500ms", "1.5s" or "64MB".
Milliseconds and kilobytes are the atomic units: a fractional value is
only allowed for the coarser units (s, MB, GB), and the result is
truncated toward zero after conversion to the atomic unit.
"""

import re
import math
import logging
from typing import Dict
from typing import Tuple

from . import common_types as ct

logger = logging.getLogger("aph.stamps")


class MalformedStamp(ct.AphError):
    pass


class SplitAtomicUnit(ct.AphError):
    pass


NUMBER_PATTERN = r"(?P<num>[0-9]+(?:\.[0-9]+)?)"

DURATION_RE = re.compile(NUMBER_PATTERN + r"(?P<unit>ms|s)")
SIZE_RE     = re.compile(NUMBER_PATTERN + r"(?P<unit>KB|MB|GB)")

ATOMIC_DURATION_UNIT = "ms"
ATOMIC_SIZE_UNIT     = "KB"

# multipliers to convert a unit to its atomic unit
DURATION_FACTORS: Dict[str, int] = {
    'ms': 1,
    's' : 1000,
}

SIZE_FACTORS: Dict[str, int] = {
    'KB': 1,
    'MB': 1024,
    'GB': 1024 * 1024,
}


def _match_stamp(stamp_re: re.Pattern, stamp: ct.Stamp, kind: str) -> Tuple[float, str]:
    match = stamp_re.fullmatch(stamp.strip())
    if match is None:
        errmsg = f"aph: provided {kind} stamp was malformed: {stamp!r}"
        raise MalformedStamp(errmsg)

    value = float(match.group('num'))
    if not math.isfinite(value):
        errmsg = f"aph: provided {kind} stamp is out of range: {stamp!r}"
        raise MalformedStamp(errmsg)

    return (value, match.group('unit'))


def _to_atomic(
    stamp      : ct.Stamp,
    value      : float,
    unit       : str,
    atomic_unit: str,
    factors    : Dict[str, int],
) -> int:
    if unit == atomic_unit and not value.is_integer():
        errmsg = f"aph: cannot use fractional value with {unit}: {value}"
        raise SplitAtomicUnit(errmsg)

    product = value * factors[unit]
    if not math.isfinite(product):
        errmsg = f"aph: provided stamp is out of range: {stamp!r}"
        raise MalformedStamp(errmsg)

    # int() truncates toward zero
    return int(product)


def parse_duration(stamp: ct.Stamp) -> ct.Milliseconds:
    """Parse a stamp like "1s" or "500ms" to milliseconds.

    >>> parse_duration("0.75s")
    750
    >>> parse_duration("500ms")
    500
    """
    value, unit = _match_stamp(DURATION_RE, stamp, kind="time")
    millis = _to_atomic(stamp, value, unit, ATOMIC_DURATION_UNIT, DURATION_FACTORS)
    logger.debug(f"parsed time stamp {stamp!r} -> {millis}ms")
    return millis


def parse_size(stamp: ct.Stamp) -> ct.KiloBytes:
    """Parse a stamp like "500KB", "64MB" or "0.75GB" to kilobytes.

    >>> parse_size("0.5MB")
    512
    >>> parse_size("1GB")
    1048576
    """
    value, unit = _match_stamp(SIZE_RE, stamp, kind="memory")
    kilobytes = _to_atomic(stamp, value, unit, ATOMIC_SIZE_UNIT, SIZE_FACTORS)
    logger.debug(f"parsed memory stamp {stamp!r} -> {kilobytes}KB")
    return kilobytes
