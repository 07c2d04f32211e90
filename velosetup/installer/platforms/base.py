#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Base installer class for platform-specific Velociraptor installers."""

import abc
import os
import subprocess
import time
from typing import List, Optional, Tuple

import psutil

from velosetup.velo_common import get_platform_name, is_privileged
from velosetup.velo_constants import VELOCIRAPTOR_BINARY_NAME
from velosetup.velo_utils import flatten, get_iterable

from velosetup.installer.configs.constants.constants import BINARY_FRONTEND
from velosetup.installer.core.effective_config import EffectiveConfiguration
from velosetup.installer.utils.logger_utils import InstallerLogger

PROCESS_STOP_TIMEOUT_SECONDS = 10


def read_pid_file(pid_file: str) -> Optional[int]:
    try:
        with open(pid_file, "r") as f:
            return int(f.read().strip())
    except (OSError, ValueError):
        return None


def _looks_like_velociraptor(name, cmdline) -> bool:
    return (name or "").startswith(VELOCIRAPTOR_BINARY_NAME) or bool(
        cmdline and os.path.basename(cmdline[0]).startswith(VELOCIRAPTOR_BINARY_NAME)
    )


def is_velociraptor_process(proc: psutil.Process) -> bool:
    try:
        return _looks_like_velociraptor(proc.name(), proc.cmdline())
    except psutil.Error:
        return False


def find_velociraptor_processes() -> List[psutil.Process]:
    found = []
    for proc in psutil.process_iter(["name", "cmdline"]):
        try:
            if _looks_like_velociraptor(proc.info.get("name"), proc.info.get("cmdline")):
                found.append(proc)
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            continue
    return found


def velociraptor_process_from_pid_file(pid_file: str) -> Optional[psutil.Process]:
    """The live Velociraptor process named by *pid_file*, or None if the file is stale."""
    pid = read_pid_file(pid_file)
    if pid is None:
        return None
    try:
        proc = psutil.Process(pid)
    except psutil.NoSuchProcess:
        return None
    return proc if is_velociraptor_process(proc) else None


class BaseInstaller(abc.ABC):
    """Abstract base class for platform-specific installers.

    Subclasses own everything that differs per operating system: how a
    service is registered, started, stopped and removed. Running commands and
    managing a detached foreground process are shared here.
    """

    def __init__(self, debug: bool = False):
        self.debug = debug
        self.platform = get_platform_name()

    ###############################################################################################
    # service management (platform-specific)
    @abc.abstractmethod
    def service_definition_path(self) -> str:
        """Where this platform keeps the service definition (unit file, plist, ...)."""
        pass

    @abc.abstractmethod
    def register_service(self, effective: EffectiveConfiguration) -> Tuple[bool, str]:
        """Write the service definition and start the service.

        Returns:
            Tuple of (success, message)
        """
        pass

    @abc.abstractmethod
    def stop_service(self) -> bool:
        pass

    @abc.abstractmethod
    def unregister_service(self) -> bool:
        pass

    def is_privileged(self) -> bool:
        return is_privileged()

    def service_requires_privilege(self) -> bool:
        return True

    ###############################################################################################
    def frontend_command(self, effective: EffectiveConfiguration) -> List[str]:
        return [effective.paths.binary_path, "--config", effective.paths.config_path, BINARY_FRONTEND]

    def run_process(
        self,
        command: List[str],
        privileged: bool = False,
        stdin: str = None,
        retry: int = 0,
        retry_sleep_sec: int = 5,
        stderr: bool = True,
        timeout: Optional[int] = None,
    ) -> Tuple[int, List[str]]:
        """Run a system process with optional privilege escalation."""
        if privileged and not self.is_privileged():
            command = ["sudo"] + command

        retcode = -1
        output = []
        flat_command = list(flatten(get_iterable(command)))

        for i in range(retry + 1):
            try:
                process = subprocess.run(
                    flat_command,
                    input=stdin if stdin else None,
                    capture_output=True,
                    check=False,
                    text=True,
                    errors="ignore",
                    timeout=timeout,
                )
                retcode = process.returncode
                output = process.stdout.splitlines() if process.stdout else []
                if stderr and process.stderr:
                    output.extend(process.stderr.splitlines())
                if retcode == 0:
                    break
            except FileNotFoundError:
                output = [f"Command {' '.join(flat_command)} not found or unable to execute"]
                retcode = 127
                break
            except subprocess.TimeoutExpired:
                output = [f"Command {' '.join(flat_command)} timed out after {timeout} seconds"]
                retcode = 124
            except OSError as e:
                output = [f"Error executing command {' '.join(flat_command)}: {e}"]
                retcode = 1

            if i < retry:
                InstallerLogger.warning(
                    f"Command failed (attempt {i+1}/{retry+1}). Retrying in {retry_sleep_sec} seconds..."
                )
                time.sleep(retry_sleep_sec)

        if self.debug:
            InstallerLogger.debug(f"Command {flat_command[0]} {flat_command[1:3]} returned {retcode}")

        return retcode, output

    ###############################################################################################
    # managed foreground process
    def start_foreground_process(self, effective: EffectiveConfiguration) -> int:
        """Start the frontend detached from this process, record its PID, and return it."""
        paths = effective.paths
        os.makedirs(os.path.dirname(paths.process_log_file), exist_ok=True)
        with open(paths.process_log_file, "ab") as log_file:
            process = subprocess.Popen(
                self.frontend_command(effective),
                stdout=log_file,
                stderr=subprocess.STDOUT,
                stdin=subprocess.DEVNULL,
                cwd=paths.install_dir,
                start_new_session=True,
            )
        with open(paths.pid_file, "w") as f:
            f.write(f"{process.pid}\n")
        InstallerLogger.info(f"Velociraptor started with PID {process.pid} (log: {paths.process_log_file})")
        return process.pid

    def stop_foreground_process(self, pid_file: str) -> bool:
        """Stop the process named by *pid_file*; returns True if something was stopped."""
        pid = read_pid_file(pid_file)
        stopped = False
        if pid is not None:
            try:
                proc = psutil.Process(pid)
                if is_velociraptor_process(proc):
                    proc.terminate()
                    try:
                        proc.wait(timeout=PROCESS_STOP_TIMEOUT_SECONDS)
                    except psutil.TimeoutExpired:
                        proc.kill()
                    InstallerLogger.info(f"Stopped Velociraptor process (PID {pid})")
                    stopped = True
                else:
                    # stale PID file whose PID has been reused
                    InstallerLogger.warning(f"PID {pid} from {pid_file} is not a Velociraptor process; leaving it running")
            except psutil.NoSuchProcess:
                InstallerLogger.debug(f"Process {pid} from {pid_file} is not running")
            except psutil.AccessDenied as e:
                InstallerLogger.warning(f"Not permitted to stop process {pid}: {e}")
                return False
        if os.path.exists(pid_file):
            os.unlink(pid_file)
        return stopped
