#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Stop a deployment and remove what the installer put on disk."""

import os
import shutil

from typing import List

from velosetup.installer.configs.constants.enums import InstallerResult
from velosetup.installer.core.effective_config import EffectiveConfiguration
from velosetup.installer.utils.logger_utils import InstallerLogger


def stop_deployment(effective: EffectiveConfiguration, platform) -> bool:
    """Stop the registered service and/or the PID-file process; True if anything was stopped."""
    InstallerLogger.start("Stopping Velociraptor")
    stopped_service = platform.stop_service()
    stopped_process = platform.stop_foreground_process(effective.paths.pid_file)
    stopped = stopped_service or stopped_process
    InstallerLogger.end(
        "Stopping Velociraptor",
        InstallerResult.SUCCESS if stopped else InstallerResult.SKIPPED,
        "Stopped" if stopped else "Nothing was running",
    )
    return stopped


def _remove_path(path: str, removed: List[str], failed: List[str]):
    if not os.path.lexists(path):
        return
    try:
        if os.path.isdir(path) and not os.path.islink(path):
            shutil.rmtree(path)
        else:
            os.unlink(path)
        removed.append(path)
        InstallerLogger.info(f"Removed {path}")
    except OSError as e:
        failed.append(path)
        InstallerLogger.error(f"Unable to remove {path}: {e}")


def uninstall(effective: EffectiveConfiguration, platform, purge: bool = False) -> bool:
    """Stop, unregister the service, then remove the binary and configuration.

    The datastore and logs are only removed when *purge* is set.
    """
    stop_deployment(effective, platform)

    InstallerLogger.start("Removing Velociraptor")
    if platform.unregister_service():
        InstallerLogger.info(f"Removed service definition {platform.service_definition_path()}")

    paths = effective.paths
    removed: List[str] = []
    failed: List[str] = []
    for path in (paths.binary_path, paths.config_path, paths.policy_file, paths.autocert_cache_dir):
        _remove_path(path, removed, failed)

    if purge:
        for path in (paths.datastore_dir, paths.logs_dir, paths.process_log_file):
            _remove_path(path, removed, failed)
        # drop the install dir itself when nothing else lives there
        bin_dir = os.path.dirname(paths.binary_path)
        for directory in (bin_dir, paths.install_dir):
            if os.path.isdir(directory) and not os.listdir(directory):
                _remove_path(directory, removed, failed)
    else:
        InstallerLogger.info(f"Keeping data in {paths.datastore_dir} and logs in {paths.logs_dir}")

    InstallerLogger.end(
        "Removing Velociraptor",
        InstallerResult.FAILURE if failed else InstallerResult.SUCCESS,
        f"{len(removed)} item(s) removed" + (f", {len(failed)} could not be removed" if failed else ""),
    )
    return not failed
