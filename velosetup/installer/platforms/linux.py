#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Linux-specific installer implementation (systemd)."""

import os
from typing import Tuple

from velosetup.velo_constants import SERVICE_NAME, SYSTEMD_UNIT_DIR
from velosetup.velo_utils import which

from velosetup.installer.core.effective_config import EffectiveConfiguration
from velosetup.installer.utils.logger_utils import InstallerLogger

from .base import BaseInstaller

SYSTEMD_UNIT_TEMPLATE = """[Unit]
Description=Velociraptor DFIR server
After=network-online.target
Wants=network-online.target

[Service]
Type=simple
ExecStart={command}
WorkingDirectory={working_dir}
Restart=on-failure
RestartSec=10
LimitNOFILE=20000

[Install]
WantedBy=multi-user.target
"""


class LinuxInstaller(BaseInstaller):
    """Linux-specific installer implementation."""

    def __init__(self, debug: bool = False, unit_dir: str = SYSTEMD_UNIT_DIR):
        super().__init__(debug)
        self.unit_dir = unit_dir

    def service_definition_path(self) -> str:
        return os.path.join(self.unit_dir, f"{SERVICE_NAME}.service")

    def render_unit(self, effective: EffectiveConfiguration) -> str:
        return SYSTEMD_UNIT_TEMPLATE.format(
            command=" ".join(f'"{arg}"' if " " in arg else arg for arg in self.frontend_command(effective)),
            working_dir=effective.paths.install_dir,
        )

    def register_service(self, effective: EffectiveConfiguration) -> Tuple[bool, str]:
        if not which("systemctl"):
            return False, "systemctl not found"
        unit_path = self.service_definition_path()
        try:
            with open(unit_path, "w") as f:
                f.write(self.render_unit(effective))
        except OSError as e:
            return False, f"Unable to write {unit_path}: {e}"
        InstallerLogger.info(f"Wrote systemd unit {unit_path}")

        for command in (
            ["systemctl", "daemon-reload"],
            ["systemctl", "enable", "--now", SERVICE_NAME],
        ):
            err, out = self.run_process(command, privileged=True)
            if err != 0:
                return False, f"{' '.join(command)} failed: {' '.join(out)}"
        return True, f"Registered systemd service {SERVICE_NAME}"

    def stop_service(self) -> bool:
        if not os.path.isfile(self.service_definition_path()):
            return False
        err, out = self.run_process(["systemctl", "stop", SERVICE_NAME], privileged=True)
        if err != 0:
            InstallerLogger.warning(f"Stopping {SERVICE_NAME} failed: {' '.join(out)}")
        return err == 0

    def unregister_service(self) -> bool:
        unit_path = self.service_definition_path()
        if not os.path.isfile(unit_path):
            return False
        self.run_process(["systemctl", "disable", "--now", SERVICE_NAME], privileged=True)
        os.unlink(unit_path)
        self.run_process(["systemctl", "daemon-reload"], privileged=True)
        InstallerLogger.info(f"Removed systemd unit {unit_path}")
        return True
