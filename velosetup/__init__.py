#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Single-host installer for the Velociraptor DFIR server."""

from velosetup.velo_constants import VELOSETUP_VERSION

__version__ = VELOSETUP_VERSION
