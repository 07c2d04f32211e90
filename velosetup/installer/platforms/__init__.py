#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Platform-specific installer implementations."""

from velosetup.velo_common import get_platform_name
from velosetup.velo_constants import PLATFORM_LINUX, PLATFORM_MAC, PLATFORM_WINDOWS

from .base import BaseInstaller
from .linux import LinuxInstaller
from .macos import MacInstaller


def get_platform_installer(debug: bool = False) -> BaseInstaller:
    """Determine the current host platform and return the matching installer."""

    platform_name = get_platform_name()

    if platform_name == PLATFORM_LINUX:
        return LinuxInstaller(debug)
    elif platform_name == PLATFORM_MAC:
        return MacInstaller(debug)
    elif platform_name == PLATFORM_WINDOWS:
        raise NotImplementedError("Windows installation is not yet supported. Please use Linux or macOS.")
    else:
        raise NotImplementedError(f"Platform '{platform_name}' is not supported")


__all__ = [
    "BaseInstaller",
    "LinuxInstaller",
    "MacInstaller",
    "get_platform_installer",
]
