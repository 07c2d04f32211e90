#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""
Installer controllers
=====================

Front ends (CLI, dialogs, windows) drive the installer through these classes.
"""

from .base_controller import BaseController
from .installation_controller import InstallationController

__all__ = [
    "BaseController",
    "InstallationController",
]
