import os
import base64

import pytest
import argon2

from aph import kdf
from aph import common_types as ct

# Reference vector for argon2id v=19 from the phc-winner-argon2 test suite
REF_HASH = (
    "$argon2id$v=19$m=65536,t=2,p=1$c29tZXNhbHQ"
    "$CTFhFdXPJO1aFaMaO6Mm5c8y7cJHAph8ArZWb2GRPPc"
)

# small enough to be fast
FAST_PARAMS = {'time_cost': 1, 'threads': 1, 'memory_kb': 64, 'length': 16}


def test_generate_hash_with_salt_reference():
    result = kdf.generate_hash_with_salt(2, 1, 65536, 32, "password", "somesalt")
    assert result.hash == REF_HASH
    assert result.characters == 86
    assert result.characters == len(result.hash)

    assert result.time    == 2
    assert result.threads == 1
    assert result.memory  == 65536
    assert result.length  == 32
    assert result.key     == "password"
    assert result.salt    == b"somesalt"
    assert result.duration >= 0


def test_generate_hash_fields():
    result = kdf.generate_hash(1, 1, 64 * 1024, 8, "mypassword")
    assert isinstance(result, ct.Result)

    assert result.time    == 1
    assert result.threads == 1
    assert result.memory  == 64 * 1024
    assert result.length  == 8
    assert result.key     == "mypassword"
    assert len(result.salt) == kdf.random_salt_len()
    assert result.hash.startswith("$argon2id$v=19$m=65536,t=1,p=1$")
    assert result.characters == len(result.hash)
    assert result.duration >= 0


@pytest.mark.parametrize("threads, length", [(1, 4), (2, 16), (4, 32), (3, 64)])
def test_characters_match_hash_len(threads, length):
    result = kdf.generate_hash(1, threads, 8 * threads * 4, length, "pw")
    assert result.characters == len(result.hash)

    salt_b64, hash_b64 = result.hash.split("$")[-2:]
    assert "=" not in hash_b64
    assert len(base64.b64decode(hash_b64 + "=" * (-len(hash_b64) % 4))) == length
    assert base64.b64decode(salt_b64 + "=" * (-len(salt_b64) % 4)) == result.salt


def test_salted_is_deterministic():
    res1 = kdf.generate_hash_with_salt(password="secret", salt="saltsalt", **FAST_PARAMS)
    res2 = kdf.generate_hash_with_salt(password="secret", salt="saltsalt", **FAST_PARAMS)
    assert res1.hash == res2.hash

    res3 = kdf.generate_hash_with_salt(password="secret", salt="saltsalT", **FAST_PARAMS)
    assert res3.hash != res1.hash


def test_random_salt_differs():
    res1 = kdf.generate_hash(password="secret", **FAST_PARAMS)
    res2 = kdf.generate_hash(password="secret", **FAST_PARAMS)
    assert res1.salt != res2.salt
    assert res1.hash != res2.hash


def test_unicode_password_and_salt():
    result = kdf.generate_hash_with_salt(password="pässwörd", salt="sälzchen", **FAST_PARAMS)
    assert result.key  == "pässwörd"
    assert result.salt == "sälzchen".encode("utf-8")

    encoded = argon2.low_level.hash_secret(
        "pässwörd".encode("utf-8"),
        "sälzchen".encode("utf-8"),
        time_cost=1,
        memory_cost=64,
        parallelism=1,
        hash_len=16,
        type=argon2.low_level.Type.ID,
    )
    assert result.hash == encoded.decode("ascii")


def test_short_salt():
    # libargon2 rejects salts shorter than 8 bytes
    try:
        kdf.generate_hash_with_salt(1, 1, 65536, 8, "mypassword", "mysalt")
        assert False, "expected ParameterError"
    except kdf.ParameterError as err:
        assert "salt length" in str(err)


INVALID_PARAMS = [
    # time_cost, threads, memory_kb, length
    (0          , 1  , 64        , 16),
    (2 ** 32    , 1  , 64        , 16),
    (1          , 0  , 64        , 16),
    (1          , 256, 4096      , 16),
    (1          , 1  , 7         , 16),
    (1          , 4  , 31        , 16),
    (1          , 1  , 2 ** 32   , 16),
    (1          , 1  , 64        , 3),
    (1          , 1  , 64        , 2 ** 32),
    (-1         , 1  , 64        , 16),
]


@pytest.mark.parametrize("time_cost, threads, memory_kb, length", INVALID_PARAMS)
def test_invalid_params(time_cost, threads, memory_kb, length):
    with pytest.raises(kdf.ParameterError):
        kdf.generate_hash(time_cost, threads, memory_kb, length, "pw")

    with pytest.raises(kdf.ParameterError):
        kdf.generate_hash_with_salt(time_cost, threads, memory_kb, length, "pw", "saltsalt")


def test_validate_params():
    params = kdf.validate_params(3, 2, 1024, 32, salt=b"12345678")
    assert params == kdf.KDFParams(time_cost=3, threads=2, memory_kb=1024, length=32)

    assert kdf.validate_params(1, 255, 8 * 255, 4).threads == 255


def test_hashing_failure(monkeypatch):
    def _failing_hash_secret(*args, **kwargs):
        raise argon2.exceptions.HashingError("Memory allocation error")

    monkeypatch.setattr(argon2.low_level, 'hash_secret', _failing_hash_secret)

    try:
        kdf.generate_hash(password="pw", **FAST_PARAMS)
        assert False, "expected HashingFailure"
    except kdf.HashingFailure as err:
        assert "Memory allocation error" in str(err)
        assert isinstance(err.__cause__, argon2.exceptions.HashingError)


@pytest.mark.parametrize("env_val", ["4", "0", "-16", "sixteen", "16.5"])
def test_invalid_random_salt_len(monkeypatch, env_val):
    monkeypatch.setenv("APH_RANDOM_SALT_LEN", env_val)
    try:
        kdf.generate_hash(password="pw", **FAST_PARAMS)
        assert False, f"expected ParameterError for {env_val!r}"
    except kdf.ParameterError as err:
        assert "APH_RANDOM_SALT_LEN" in str(err)


def test_default_random_salt_len(monkeypatch):
    monkeypatch.delenv("APH_RANDOM_SALT_LEN", raising=False)
    assert kdf.random_salt_len() == 16

    monkeypatch.setenv("APH_RANDOM_SALT_LEN", "")
    assert kdf.random_salt_len() == 16


def test_random_salt_len(monkeypatch):
    monkeypatch.setenv("APH_RANDOM_SALT_LEN", "32")
    result = kdf.generate_hash(password="pw", **FAST_PARAMS)
    assert len(result.salt) == 32


def test_hash_secret_arguments(monkeypatch):
    calls = []

    def _fake_hash_secret(secret, salt, **kwargs):
        calls.append(kwargs)
        return b"$argon2id$v=19$m=64,t=1,p=1$c2FsdHNhbHQ$AAAAAAAAAAAAAAAAAAAAAA"

    monkeypatch.setattr(argon2.low_level, 'hash_secret', _fake_hash_secret)

    result = kdf.generate_hash_with_salt(password="pw", salt="saltsalt", **FAST_PARAMS)
    assert len(calls) == 1
    assert calls[0]['type'] == argon2.low_level.Type.ID
    assert calls[0]['memory_cost'] == 64
    assert calls[0]['parallelism'] == 1
    assert calls[0]['time_cost'] == 1
    assert calls[0]['hash_len'] == 16
    assert result.duration >= 0
    assert result.characters == len(result.hash)


@pytest.mark.skipif("slow" in os.getenv('PYTEST_SKIP', ""), reason="Hashing with 256MB is expensive")
def test_generate_hash_large_memory():
    result = kdf.generate_hash(1, 4, 256 * 1024, 32, "pw")
    assert "m=262144,t=1,p=4" in result.hash


def test_non_utf8_arguments():
    # how python decodes b"pw\xff" and b"saltsalt\xfe" from sys.argv
    password = b"pw\xff".decode("utf-8", "surrogateescape")
    salt     = b"saltsalt\xfe".decode("utf-8", "surrogateescape")

    result = kdf.generate_hash_with_salt(password=password, salt=salt, **FAST_PARAMS)
    assert result.key  == password
    assert result.salt == b"saltsalt\xfe"

    encoded = argon2.low_level.hash_secret(
        b"pw\xff",
        b"saltsalt\xfe",
        time_cost=1,
        memory_cost=64,
        parallelism=1,
        hash_len=16,
        type=argon2.low_level.Type.ID,
    )
    assert result.hash == encoded.decode("ascii")
