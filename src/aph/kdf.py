# This file is part of the aph project
# https://github.com/mbarkhau/aph
#
# Copyright (c) 2019-2022 Manuel Barkhau (mbarkhau@gmail.com) - MIT License
# SPDX-License-Identifier: MIT
"""Generation of Argon2id hashes.

The hashing itself is done by argon2-cffi. This module validates the
parameters, times the call and packages everything into a Result.
"""

import os
import logging
from typing import Optional
from typing import NamedTuple

import argon2

from . import perflog
from . import common_types as ct

logger = logging.getLogger("aph.kdf")


class ParameterError(ct.AphError):
    pass


class HashingFailure(ct.AphError):
    pass


ARGON2_VERSION = argon2.low_level.ARGON2_VERSION

MAX_U8  = 2 ** 8  - 1
MAX_U32 = 2 ** 32 - 1

MIN_THREADS   = 1
MIN_TIME_COST = 1
MIN_HASH_LEN  = 4
MIN_SALT_LEN  = 8

# argon2 needs at least 8 blocks of 1KB per lane
MIN_MEMORY_PER_THREAD = 8

DEFAULT_RANDOM_SALT_LEN = argon2.DEFAULT_RANDOM_SALT_LENGTH


# Arguments are decoded by python with surrogateescape, so encoding the
# same way recovers the bytes as they were given on the command line.
def text2bytes(text: str) -> bytes:
    return text.encode("utf-8", "surrogateescape")


def random_salt_len() -> int:
    env_val = os.getenv("APH_RANDOM_SALT_LEN")
    if not env_val:
        return DEFAULT_RANDOM_SALT_LEN

    try:
        salt_len = int(env_val)
    except ValueError as err:
        errmsg = f"aph: invalid APH_RANDOM_SALT_LEN={env_val!r} (must be an integer)"
        raise ParameterError(errmsg) from err

    if salt_len < MIN_SALT_LEN:
        errmsg = f"aph: invalid APH_RANDOM_SALT_LEN={salt_len} (must be >= {MIN_SALT_LEN})"
        raise ParameterError(errmsg)

    return salt_len


class KDFParams(NamedTuple):
    time_cost: ct.Iterations
    threads  : ct.Parallelism
    memory_kb: ct.KiloBytes
    length   : int


def _check_range(name: str, value: int, lo: int, hi: int) -> None:
    if not lo <= value <= hi:
        errmsg = f"aph: invalid {name}: {value} (must be in {lo}..{hi})"
        raise ParameterError(errmsg)


def validate_params(
    time_cost: ct.Iterations,
    threads  : ct.Parallelism,
    memory_kb: ct.KiloBytes,
    length   : int,
    salt     : Optional[ct.Salt] = None,
) -> KDFParams:
    _check_range("threads"    , threads  , MIN_THREADS, MAX_U8)
    _check_range("time cost"  , time_cost, MIN_TIME_COST, MAX_U32)
    _check_range("memory"     , memory_kb, MIN_MEMORY_PER_THREAD * threads, MAX_U32)
    _check_range("hash length", length   , MIN_HASH_LEN, MAX_U32)
    if salt is not None:
        _check_range("salt length", len(salt), MIN_SALT_LEN, MAX_U32)

    return KDFParams(time_cost, threads, memory_kb, length)


def hash_encoded(password: bytes, salt: ct.Salt, params: KDFParams) -> ct.EncodedHash:
    try:
        result = argon2.low_level.hash_secret(
            secret=password,
            salt=salt,
            time_cost=params.time_cost,
            memory_cost=params.memory_kb,
            parallelism=params.threads,
            hash_len=params.length,
            type=argon2.low_level.Type.ID,
            version=ARGON2_VERSION,
        )
    except argon2.exceptions.HashingError as err:
        raise HashingFailure(f"aph: hashing failed: {err}") from err

    return result.decode("ascii")


def _generate(params: KDFParams, password: ct.Password, salt: ct.Salt) -> ct.Result:
    logger.debug(
        f"argon2id t={params.time_cost} p={params.threads} "
        f"m={params.memory_kb}KB len={params.length} salt_len={len(salt)}"
    )
    password_data = text2bytes(password)

    with perflog.trace("argon2id") as elapsed:
        encoded = hash_encoded(password_data, salt, params)

    logger.info(f"hash generated in {elapsed.millis}ms")

    return ct.Result(
        time=params.time_cost,
        threads=params.threads,
        memory=params.memory_kb,
        length=params.length,
        key=password,
        hash=encoded,
        characters=len(encoded),
        duration=elapsed.millis,
        salt=salt,
    )


def generate_hash(
    time_cost: ct.Iterations,
    threads  : ct.Parallelism,
    memory_kb: ct.KiloBytes,
    length   : int,
    password : ct.Password,
) -> ct.Result:
    """Hash password using a freshly generated random salt."""
    params = validate_params(time_cost, threads, memory_kb, length)
    salt   = os.urandom(random_salt_len())
    return _generate(params, password, salt)


def generate_hash_with_salt(
    time_cost: ct.Iterations,
    threads  : ct.Parallelism,
    memory_kb: ct.KiloBytes,
    length   : int,
    password : ct.Password,
    salt     : str,
) -> ct.Result:
    """Hash password with a caller supplied salt.

    The salt is used verbatim (utf-8, surrogateescape), so the result is
    deterministic for identical arguments.
    """
    salt_data = text2bytes(salt)
    params    = validate_params(time_cost, threads, memory_kb, length, salt=salt_data)
    return _generate(params, password, salt_data)
