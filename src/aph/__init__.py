# This file is part of the aph project
# https://github.com/mbarkhau/aph
#
# Copyright (c) 2019-2022 Manuel Barkhau (mbarkhau@gmail.com) - MIT License
# SPDX-License-Identifier: MIT
"""APH: Argon2id Password Hasher.

A cli app to generate Argon2id hashes and report how long they took.
"""

__version__ = "2022.1009-beta"
