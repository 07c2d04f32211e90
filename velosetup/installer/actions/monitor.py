#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Liveness probes and the health report for a deployed Velociraptor server."""

import os

from dataclasses import dataclass, field
from typing import List, Optional

import psutil
import requests
import urllib3

from velosetup.velo_common import disk_free_bytes
from velosetup.velo_constants import MIN_FREE_DISK_BYTES
from velosetup.velo_utils import check_socket, probe_address, sizeof_fmt
from velosetup.installer.configs.constants.constants import PROBE_CONNECT_TIMEOUT_SECONDS
from velosetup.installer.configs.constants.enums import HealthCheckResult, OverallHealth
from velosetup.installer.core.effective_config import EffectiveConfiguration
from velosetup.installer.platforms.base import find_velociraptor_processes, velociraptor_process_from_pid_file
from velosetup.installer.utils.logger_utils import InstallerLogger

# the GUI certificate is self-signed by default
urllib3.disable_warnings()

LOW_MEMORY_PERCENT = 10


@dataclass(frozen=True)
class MonitorStatus:
    process_running: bool
    port_listening: bool
    http_reachable: bool

    @property
    def healthy(self) -> bool:
        return self.process_running and self.port_listening and self.http_reachable

    def describe(self) -> str:
        return ", ".join(
            f"{name} {'ok' if ok else 'down'}"
            for name, ok in (
                ("process", self.process_running),
                ("port", self.port_listening),
                ("https", self.http_reachable),
            )
        )


@dataclass
class HealthCheck:
    name: str
    result: HealthCheckResult
    message: str


@dataclass
class HealthReport:
    checks: List[HealthCheck] = field(default_factory=list)

    def add(self, name: str, result: HealthCheckResult, message: str):
        self.checks.append(HealthCheck(name, result, message))

    @property
    def overall(self) -> OverallHealth:
        results = {c.result for c in self.checks}
        if HealthCheckResult.FAIL in results:
            return OverallHealth.UNHEALTHY
        if HealthCheckResult.WARN in results:
            return OverallHealth.HEALTHY_WITH_WARNINGS
        return OverallHealth.HEALTHY

    def format_lines(self) -> List[str]:
        lines = [f"[{c.result.value}] {c.name}: {c.message}" for c in self.checks]
        lines.append(f"Overall status: {self.overall.value}")
        return lines


class DeploymentMonitor:
    """Stateless probes; every call looks at the system afresh."""

    def process_running(self, pid_file: Optional[str] = None) -> bool:
        if pid_file and os.path.isfile(pid_file) and velociraptor_process_from_pid_file(pid_file) is not None:
            return True
        # no PID file, or a stale one: the server may be running as a service
        return bool(find_velociraptor_processes())

    def port_listening(self, bind_address: str, port: int) -> bool:
        return check_socket(probe_address(bind_address), port, timeout=PROBE_CONNECT_TIMEOUT_SECONDS)

    def http_reachable(self, bind_address: str, port: int) -> bool:
        url = f"https://{probe_address(bind_address)}:{port}/"
        try:
            # any HTTP response (401/403 included) means the server is answering
            requests.get(url, verify=False, timeout=PROBE_CONNECT_TIMEOUT_SECONDS, allow_redirects=False)
            return True
        except requests.RequestException as e:
            InstallerLogger.debug(f"GET {url} failed: {e}")
            return False

    def check(self, bind_address: str, port: int, pid_file: Optional[str] = None) -> MonitorStatus:
        port_ok = self.port_listening(bind_address, port)
        return MonitorStatus(
            process_running=self.process_running(pid_file),
            port_listening=port_ok,
            http_reachable=port_ok and self.http_reachable(bind_address, port),
        )

    def health_report(self, effective: EffectiveConfiguration) -> HealthReport:
        """Run every health check against an installed deployment."""
        paths = effective.paths
        report = HealthReport()

        # binary
        if os.path.isfile(paths.binary_path) and os.access(paths.binary_path, os.X_OK):
            report.add("Binary", HealthCheckResult.PASS, f"Found at {paths.binary_path}")
        else:
            report.add("Binary", HealthCheckResult.FAIL, f"Not found or not executable at {paths.binary_path}")

        # directories
        missing = [d for d in (paths.install_dir, paths.datastore_dir, paths.logs_dir) if not os.path.isdir(d)]
        if missing:
            report.add("Directories", HealthCheckResult.FAIL, f"Missing: {', '.join(missing)}")
        elif not os.access(paths.datastore_dir, os.W_OK):
            report.add("Directories", HealthCheckResult.FAIL, f"{paths.datastore_dir} is not writable")
        else:
            report.add("Directories", HealthCheckResult.PASS, "All directories present")

        # process
        has_pid_file = os.path.isfile(paths.pid_file)
        proc = velociraptor_process_from_pid_file(paths.pid_file) if has_pid_file else None
        if proc is not None:
            report.add("Process", HealthCheckResult.PASS, f"Running (PID {proc.pid})")
        elif procs := find_velociraptor_processes():
            pids = ", ".join(str(p.pid) for p in procs)
            if has_pid_file:
                report.add("Process", HealthCheckResult.WARN, f"Running but PID file is stale (PIDs: {pids})")
            else:
                report.add("Process", HealthCheckResult.WARN, f"Running but no PID file (PIDs: {pids})")
        elif has_pid_file:
            report.add("Process", HealthCheckResult.FAIL, "PID file exists but process not running")
        else:
            report.add("Process", HealthCheckResult.FAIL, "Not running")

        # network
        network = effective.network
        if self.port_listening(network.bind_address, network.port):
            if self.http_reachable(network.bind_address, network.port):
                report.add("Network", HealthCheckResult.PASS, f"GUI port {network.port} is responding")
            else:
                report.add("Network", HealthCheckResult.WARN, "Port is open but web interface may not be ready")
        else:
            report.add("Network", HealthCheckResult.FAIL, f"GUI port {network.port} is not accessible")

        # disk space
        free = disk_free_bytes(paths.datastore_dir)
        if free >= MIN_FREE_DISK_BYTES:
            report.add("Disk Space", HealthCheckResult.PASS, f"{sizeof_fmt(free)} available")
        else:
            report.add(
                "Disk Space",
                HealthCheckResult.WARN,
                f"Only {sizeof_fmt(free)} available (recommended: >{sizeof_fmt(MIN_FREE_DISK_BYTES)})",
            )

        # system resources
        memory = psutil.virtual_memory()
        free_percent = 100.0 - memory.percent
        if free_percent >= LOW_MEMORY_PERCENT:
            report.add("System Resources", HealthCheckResult.PASS, f"Memory: {free_percent:.0f}% free")
        else:
            report.add("System Resources", HealthCheckResult.WARN, f"Low available memory ({free_percent:.0f}% free)")

        # logs
        if os.path.isfile(paths.process_log_file):
            report.add(
                "Logs",
                HealthCheckResult.PASS,
                f"Main log exists ({sizeof_fmt(os.path.getsize(paths.process_log_file))})",
            )
        elif os.path.isdir(paths.logs_dir) and os.listdir(paths.logs_dir):
            report.add("Logs", HealthCheckResult.PASS, f"Component logs present in {paths.logs_dir}")
        else:
            report.add("Logs", HealthCheckResult.WARN, f"No log files found in {paths.logs_dir}")

        # configuration
        if os.path.isfile(paths.config_path) and os.path.getsize(paths.config_path) > 0:
            report.add("Configuration", HealthCheckResult.PASS, f"Configuration found: {paths.config_path}")
        else:
            report.add("Configuration", HealthCheckResult.WARN, f"No configuration at {paths.config_path}")

        return report
