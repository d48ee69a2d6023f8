#!/usr/bin/env python
# This file is part of the aph project
# https://github.com/mbarkhau/aph
#
# Copyright (c) 2019-2022 Manuel Barkhau (mbarkhau@gmail.com) - MIT License
# SPDX-License-Identifier: MIT
"""
__main__ module for APH.

Enables use as module: $ python -m aph
"""


if __name__ == '__main__':
    from . import cli

    cli.main()
