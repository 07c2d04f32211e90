#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Discover and download Velociraptor release binaries from GitHub."""

import os
import stat

from typing import Any, Dict, Optional, Tuple

import requests

from velosetup.velo_common import DownloadToFile, get_platform_name, get_system_architecture
from velosetup.velo_constants import (
    VELOCIRAPTOR_ASSET_EXCLUDES,
    VELOCIRAPTOR_ASSET_PATTERNS,
    VELOCIRAPTOR_RELEASE_API_URL,
    VELOCIRAPTOR_RELEASE_USER_AGENT,
)
from velosetup.velo_utils import sizeof_fmt
from velosetup.installer.configs.constants.constants import (
    DOWNLOAD_SUFFIX,
    RELEASE_DISCOVERY_TIMEOUT_SECONDS,
    RELEASE_DOWNLOAD_TIMEOUT_SECONDS,
)
from velosetup.installer.utils.exceptions import ReleaseDiscoveryError
from velosetup.installer.utils.logger_utils import InstallerLogger


def select_asset(release: Dict[str, Any], pattern: str) -> Optional[Tuple[str, str]]:
    """First asset (manifest order) whose name contains *pattern* and no excluded word."""
    for asset in release.get("assets", []) or []:
        name = asset.get("name", "")
        if pattern in name and not any(x in name for x in VELOCIRAPTOR_ASSET_EXCLUDES):
            url = asset.get("browser_download_url")
            if url:
                return name, url
    return None


class ReleaseClient:
    """Looks up the latest release and fetches the matching binary."""

    def __init__(
        self,
        api_url: str = VELOCIRAPTOR_RELEASE_API_URL,
        platform_name: str = None,
        architecture: str = None,
        debug: bool = False,
    ):
        self.api_url = api_url
        self.platform_name = platform_name or get_platform_name()
        self.architecture = architecture or get_system_architecture()
        self.debug = debug

    def asset_pattern(self) -> str:
        pattern = VELOCIRAPTOR_ASSET_PATTERNS.get((self.platform_name, self.architecture))
        if not pattern:
            raise ReleaseDiscoveryError(
                f"No Velociraptor release is published for {self.platform_name}/{self.architecture}"
            )
        return pattern

    def fetch_release(self) -> Dict[str, Any]:
        try:
            response = requests.get(
                self.api_url,
                headers={
                    "User-Agent": VELOCIRAPTOR_RELEASE_USER_AGENT,
                    "Accept": "application/vnd.github+json",
                },
                timeout=RELEASE_DISCOVERY_TIMEOUT_SECONDS,
            )
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            raise ReleaseDiscoveryError(f"Failed to fetch release information from {self.api_url}: {e}") from e
        except ValueError as e:
            raise ReleaseDiscoveryError(f"Release information from {self.api_url} is not valid JSON: {e}") from e

    def discover_asset(self) -> Tuple[str, str]:
        """Return (asset name, download URL) for this host."""
        pattern = self.asset_pattern()
        release = self.fetch_release()
        if not (asset := select_asset(release, pattern)):
            raise ReleaseDiscoveryError(
                f"Could not find a {pattern} binary in release {release.get('tag_name', '(unknown)')}"
            )
        InstallerLogger.info(f"Selected release asset {asset[0]} ({release.get('tag_name', 'latest')})")
        return asset

    def download(self, url: str, destination: str) -> str:
        """Download *url* to a temporary name beside *destination*, then move it into place executable."""
        os.makedirs(os.path.dirname(os.path.abspath(destination)), exist_ok=True)
        temp_path = destination + DOWNLOAD_SUFFIX
        try:
            if not DownloadToFile(url, temp_path, debug=self.debug, timeout=RELEASE_DOWNLOAD_TIMEOUT_SECONDS):
                raise ReleaseDiscoveryError(f"Downloaded file from {url} is empty")
            os.chmod(temp_path, os.stat(temp_path).st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
            os.replace(temp_path, destination)
        except requests.RequestException as e:
            raise ReleaseDiscoveryError(f"Failed to download {url}: {e}") from e
        except OSError as e:
            raise ReleaseDiscoveryError(f"Failed to install {destination}: {e}") from e
        finally:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
        InstallerLogger.info(f"Installed {destination} ({sizeof_fmt(os.path.getsize(destination))})")
        return destination

    def acquire(self, destination: str) -> str:
        _, url = self.discover_asset()
        return self.download(url, destination)
