#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

import os
import platform
import sys

from pathlib import Path

import psutil
import requests

from ruamel.yaml import YAML

from velosetup.velo_constants import (
    DEFAULT_INSTALL_DIR_LINUX,
    DEFAULT_INSTALL_DIR_MAC,
    DEFAULT_INSTALL_DIR_WINDOWS,
    PLATFORM_MAC,
    PLATFORM_WINDOWS,
    VELOCIRAPTOR_RELEASE_USER_AGENT,
)
from velosetup.velo_utils import eprint, sizeof_fmt


###################################################################################################
# Platform detection utilities
def get_platform_name() -> str:
    """Return one of the PLATFORM_* constants for the current host (or platform.system() verbatim)."""
    return platform.system()


def get_system_architecture() -> str:
    """Normalize the machine architecture to the naming used by release assets."""
    raw_platform = platform.machine().lower()
    if raw_platform in ("aarch64", "arm64"):
        return "arm64"
    else:
        return "amd64"


def get_default_install_dir(platform_name: str = None) -> str:
    platform_name = platform_name or get_platform_name()
    if platform_name == PLATFORM_MAC:
        return os.path.expanduser(DEFAULT_INSTALL_DIR_MAC)
    elif platform_name == PLATFORM_WINDOWS:
        return DEFAULT_INSTALL_DIR_WINDOWS
    else:
        return DEFAULT_INSTALL_DIR_LINUX


def is_privileged() -> bool:
    """True when running as root (or an elevated administrator on Windows)."""
    if hasattr(os, "geteuid"):
        return os.geteuid() == 0
    try:
        import ctypes

        return bool(ctypes.windll.shell32.IsUserAnAdmin())
    except Exception:
        return False


def disk_free_bytes(path: str = "/") -> int:
    """Return free bytes on the filesystem that contains *path* (or its nearest existing parent)."""
    candidate = Path(path).expanduser().absolute()
    while not candidate.exists() and candidate != candidate.parent:
        candidate = candidate.parent
    try:
        return psutil.disk_usage(str(candidate)).free
    except (OSError, FileNotFoundError):
        return 0


###################################################################################################
# download to file
def DownloadToFile(url, local_filename, debug=False, timeout=300):
    r = requests.get(
        url,
        stream=True,
        allow_redirects=True,
        timeout=timeout,
        headers={"User-Agent": VELOCIRAPTOR_RELEASE_USER_AGENT},
    )
    r.raise_for_status()
    with open(local_filename, 'wb') as f:
        for chunk in r.iter_content(chunk_size=1024 * 64):
            if chunk:
                f.write(chunk)
    fExists = os.path.isfile(local_filename)
    fSize = os.path.getsize(local_filename) if fExists else 0
    if debug:
        eprint(f"Download of {url} to {local_filename} {'succeeded' if fExists else 'failed'} ({sizeof_fmt(fSize)})")
    return fExists and (fSize > 0)


###################################################################################################
def LoadYaml(inputFileName):
    result = None
    if inputFileName and os.path.isfile(inputFileName):
        with open(inputFileName, 'r') as f:
            inYaml = YAML(typ='safe', pure=True)
            result = inYaml.load(f)
    return result


def DumpYaml(data, outputFileName):
    with open(outputFileName, 'w') as outfile:
        outYaml = YAML(typ='rt')
        outYaml.default_flow_style = False
        outYaml.width = sys.maxsize
        outYaml.dump(data, outfile)
