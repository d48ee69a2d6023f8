# This file is part of the aph project
# https://github.com/mbarkhau/aph
#
# Copyright (c) 2019-2022 Manuel Barkhau (mbarkhau@gmail.com) - MIT License
# SPDX-License-Identifier: MIT
"""Types used across multiple modules."""

from typing import Any
from typing import NamedTuple

# from typing import TypeAlias
TypeAlias = Any

Iterations  : TypeAlias = int
Parallelism : TypeAlias = int
KiloBytes   : TypeAlias = int
Milliseconds: TypeAlias = int

Stamp   : TypeAlias = str
Password: TypeAlias = str
Salt    : TypeAlias = bytes

EncodedHash: TypeAlias = str


class AphError(ValueError):
    """Base for every error that ends an aph invocation."""


class Result(NamedTuple):

    time      : Iterations
    threads   : Parallelism
    memory    : KiloBytes
    length    : int
    key       : Password
    hash      : EncodedHash
    characters: int
    duration  : Milliseconds
    salt      : Salt  # raw bytes, as passed to argon2
