#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""macOS-specific installer implementation (launchd)."""

import os
import plistlib
from typing import Any, Dict, Tuple

from velosetup.velo_constants import LAUNCHD_AGENT_DIR, LAUNCHD_LABEL

from velosetup.installer.core.effective_config import EffectiveConfiguration
from velosetup.installer.utils.logger_utils import InstallerLogger

from .base import BaseInstaller


class MacInstaller(BaseInstaller):
    """macOS-specific installer implementation."""

    def __init__(self, debug: bool = False, agent_dir: str = LAUNCHD_AGENT_DIR):
        super().__init__(debug)
        self.agent_dir = os.path.expanduser(agent_dir)

    def service_requires_privilege(self) -> bool:
        # per-user LaunchAgent
        return False

    def service_definition_path(self) -> str:
        return os.path.join(self.agent_dir, f"{LAUNCHD_LABEL}.plist")

    def build_plist(self, effective: EffectiveConfiguration) -> Dict[str, Any]:
        paths = effective.paths
        return {
            "Label": LAUNCHD_LABEL,
            "ProgramArguments": self.frontend_command(effective),
            "RunAtLoad": True,
            "KeepAlive": True,
            "StandardOutPath": paths.process_log_file,
            "StandardErrorPath": os.path.join(paths.logs_dir, "velociraptor.error.log"),
            "WorkingDirectory": paths.install_dir,
        }

    def register_service(self, effective: EffectiveConfiguration) -> Tuple[bool, str]:
        plist_path = self.service_definition_path()
        try:
            os.makedirs(self.agent_dir, exist_ok=True)
            os.makedirs(effective.paths.logs_dir, exist_ok=True)
            with open(plist_path, "wb") as f:
                plistlib.dump(self.build_plist(effective), f)
        except OSError as e:
            return False, f"Unable to write {plist_path}: {e}"
        InstallerLogger.info(f"Created launchd plist at {plist_path}")

        err, out = self.run_process(["launchctl", "load", "-w", plist_path])
        if err != 0:
            return False, f"launchctl load failed: {' '.join(out)}"
        return True, f"Loaded launchd agent {LAUNCHD_LABEL}"

    def stop_service(self) -> bool:
        plist_path = self.service_definition_path()
        if not os.path.isfile(plist_path):
            return False
        err, out = self.run_process(["launchctl", "unload", plist_path])
        if err != 0:
            InstallerLogger.warning(f"launchctl unload failed: {' '.join(out)}")
        return err == 0

    def unregister_service(self) -> bool:
        plist_path = self.service_definition_path()
        if not os.path.isfile(plist_path):
            return False
        self.stop_service()
        os.unlink(plist_path)
        InstallerLogger.info(f"Removed launchd plist {plist_path}")
        return True
