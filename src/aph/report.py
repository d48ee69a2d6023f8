# This file is part of the aph project
# https://github.com/mbarkhau/aph
#
# Copyright (c) 2019-2022 Manuel Barkhau (mbarkhau@gmail.com) - MIT License
# SPDX-License-Identifier: MIT
"""Formatting of a Result for display."""

import base64

from . import common_types as ct


REPORT_TEMPLATE = """
Generation Results:
Time: {time}ms
Threads: {threads}
Memory: {memory}KB
Length: {length}

Key: {key}
Salt: {salt}

Hash: {hash}
Hash Length: {characters}
Generation Time: {duration}ms
"""


def salt2text(salt: ct.Salt) -> str:
    """Encode salt bytes as base64 without padding.

    >>> salt2text(b"mysalt")
    'bXlzYWx0'
    """
    return base64.b64encode(salt).decode("ascii").rstrip("=")


def display_salt(result: ct.Result, salt_supplied: bool) -> str:
    # A salt from the command line is shown as it was typed, a random
    # salt may not be printable.
    if salt_supplied:
        return result.salt.decode("utf-8", "surrogateescape")
    else:
        return salt2text(result.salt)


def format_result(result: ct.Result, salt_supplied: bool) -> str:
    fields = result._asdict()
    fields['salt'] = display_salt(result, salt_supplied)
    return REPORT_TEMPLATE.format(**fields).strip()
