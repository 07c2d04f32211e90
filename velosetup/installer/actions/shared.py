#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""
Installation step actions shared by every platform.

Each step takes a StepContext and returns a short success message. A fatal
step signals failure by raising FatalStepError (or a subclass); a non-fatal
step raises DegradedStepWarning. Degraded successes (e.g., falling back from a
service to a foreground process) are recorded with StepContext.warn.
"""

import os
import stat
import time

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from velosetup.velo_common import disk_free_bytes, DumpYaml, LoadYaml
from velosetup.velo_constants import DeploymentTier, MIN_FREE_DISK_BYTES, VELOSETUP_VERSION
from velosetup.velo_utils import port_is_free, sizeof_fmt
from velosetup.installer.actions.config_patcher import build_compliance_edits, ConfigFilePatcher
from velosetup.installer.configs.constants.constants import (
    BINARY_ADMIN_ROLE,
    BINARY_COMMAND_TIMEOUT_SECONDS,
    BINARY_CONFIG_GENERATE,
    BINARY_USER_ADD,
    REACHABILITY_POLL_INTERVAL_SECONDS,
    REACHABILITY_TIMEOUT_SECONDS,
)
from velosetup.installer.core.effective_config import EffectiveConfiguration
from velosetup.installer.utils.exceptions import (
    ConfigPatchError,
    DegradedStepWarning,
    FatalStepError,
    ReachabilityTimeout,
)
from velosetup.installer.utils.logger_utils import InstallerLogger


@dataclass
class StepContext:
    """Everything a step needs; built fresh by the pipeline for each run."""

    effective: EffectiveConfiguration
    platform: Any
    monitor: Any
    release_client: Any
    reachability_timeout: float = REACHABILITY_TIMEOUT_SECONDS
    poll_interval: float = REACHABILITY_POLL_INTERVAL_SECONDS
    sleep: Callable[[float], None] = time.sleep
    clock: Callable[[], float] = time.monotonic
    warnings: List[str] = field(default_factory=list)

    def warn(self, message: str):
        InstallerLogger.warning(message)
        self.warnings.append(message)


def wants_service(effective: EffectiveConfiguration) -> bool:
    return effective.tier != DeploymentTier.STANDALONE or effective.install_as_service


def _update_policy_file(path: str, section: str, data: Dict[str, Any]) -> None:
    """Merge one section into the deployment policy sidecar (YAML)."""
    policy = LoadYaml(path) or {}
    policy[section] = data
    policy["generated_by"] = f"velosetup {VELOSETUP_VERSION}"
    policy["updated"] = datetime.now().isoformat(timespec="seconds")
    DumpYaml(policy, path)


###################################################################################################
def prerequisite_check(ctx: StepContext) -> str:
    effective = ctx.effective
    platform = ctx.platform

    if wants_service(effective) and platform.service_requires_privilege() and not platform.is_privileged():
        raise FatalStepError(
            "Administrator rights are required to register a service",
            remediation="Verify administrator rights",
        )

    network = effective.network
    if not port_is_free(network.bind_address, network.port):
        raise FatalStepError(
            f"Port {network.port} on {network.bind_address} is already in use",
            remediation="Check port availability",
        )

    free = disk_free_bytes(effective.paths.install_dir)
    if free < MIN_FREE_DISK_BYTES:
        raise FatalStepError(
            f"Only {sizeof_fmt(free)} free for {effective.paths.install_dir} "
            f"(at least {sizeof_fmt(MIN_FREE_DISK_BYTES)} required)"
        )

    return f"Port {network.port} available, {sizeof_fmt(free)} free"


def acquire_binary(ctx: StepContext) -> str:
    binary_path = ctx.effective.paths.binary_path

    if os.path.isfile(binary_path) and os.path.getsize(binary_path) > 0:
        if not os.access(binary_path, os.X_OK):
            os.chmod(binary_path, os.stat(binary_path).st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return f"Using existing binary {binary_path}"

    # ReleaseDiscoveryError is a FatalStepError and propagates as-is
    ctx.release_client.acquire(binary_path)

    if not (os.path.isfile(binary_path) and os.path.getsize(binary_path) > 0):
        raise FatalStepError(f"Binary {binary_path} is missing or empty after download")
    return f"Downloaded {binary_path}"


def generate_base_config(ctx: StepContext) -> str:
    paths = ctx.effective.paths
    try:
        for directory in (paths.install_dir, paths.datastore_dir, paths.logs_dir):
            os.makedirs(directory, exist_ok=True)
    except OSError as e:
        raise FatalStepError(f"Unable to create directories: {e}") from e

    err, out = ctx.platform.run_process(
        [paths.binary_path, *BINARY_CONFIG_GENERATE],
        stderr=False,
        timeout=BINARY_COMMAND_TIMEOUT_SECONDS,
    )
    if err != 0:
        raise FatalStepError(f"'config generate' exited with {err}: {' '.join(out)[:500]}")
    if not any(line.strip() for line in out):
        raise FatalStepError("'config generate' produced no output")

    try:
        with open(paths.config_path, "w", encoding="utf-8") as f:
            f.write("\n".join(out) + "\n")
        os.chmod(paths.config_path, stat.S_IRUSR | stat.S_IWUSR)
    except OSError as e:
        raise FatalStepError(f"Unable to write {paths.config_path}: {e}") from e
    return f"Wrote {paths.config_path}"


def patch_config(ctx: StepContext) -> str:
    path = ctx.effective.paths.config_path
    changed = ConfigFilePatcher(path).patch(ctx.effective)
    return f"Patched {path}" if changed else f"{path} already up to date"


def provision_credentials(ctx: StepContext) -> str:
    effective = ctx.effective
    credentials = effective.credentials
    err, out = ctx.platform.run_process(
        [
            effective.paths.binary_path,
            "--config",
            effective.paths.config_path,
            *BINARY_USER_ADD,
            credentials.username,
            credentials.password,
            "--role",
            BINARY_ADMIN_ROLE,
        ],
        timeout=BINARY_COMMAND_TIMEOUT_SECONDS,
    )
    if err != 0:
        raise DegradedStepWarning(
            f"Creating administrator '{credentials.username}' failed ({err}): {' '.join(out)[:300]}"
        )
    source = "custom" if credentials.is_custom else "generated"
    return f"Administrator '{credentials.username}' created ({source} password)"


def install_service_or_process(ctx: StepContext) -> str:
    effective = ctx.effective
    platform = ctx.platform

    # a foreground process or stale PID file left over from an earlier run
    platform.stop_foreground_process(effective.paths.pid_file)

    if wants_service(effective):
        ok, message = platform.register_service(effective)
        if ok:
            return message
        ctx.warn(f"Service registration failed ({message}); falling back to a foreground process")

    try:
        pid = platform.start_foreground_process(effective)
    except OSError as e:
        raise DegradedStepWarning(f"Unable to start Velociraptor: {e}") from e
    return f"Started foreground process (PID {pid})"


def configure_artifact_packs(ctx: StepContext) -> str:
    effective = ctx.effective
    try:
        _update_policy_file(
            effective.paths.policy_file,
            "artifacts",
            {"ids": list(effective.artifact_ids)},
        )
        _update_policy_file(
            effective.paths.policy_file,
            "deployment",
            {
                "tier": effective.tier.value,
                "security_level": effective.security_level.value,
                "collector_count": effective.collector_count,
                "max_clients": effective.max_clients,
                "clustering_enabled": effective.clustering_enabled,
                "password_complexity": effective.password_complexity,
                "certificate_algorithm": effective.certificate_algorithm,
                "certificate_auto_renewal": effective.certificate_auto_renewal,
                "certificate_duration_days": effective.certificate_duration_days,
            },
        )
    except OSError as e:
        raise DegradedStepWarning(f"Unable to record artifact packs: {e}") from e
    return f"{len(effective.artifact_ids)} artifact(s) recorded in {effective.paths.policy_file}"


def apply_compliance_overrides(ctx: StepContext) -> str:
    effective = ctx.effective
    if not effective.compliance_enforced:
        return "No compliance framework selected"

    try:
        ConfigFilePatcher(effective.paths.config_path).apply(build_compliance_edits(effective))
        _update_policy_file(
            effective.paths.policy_file,
            "compliance",
            {
                "framework": effective.compliance.value,
                "audit_required": effective.audit_required,
                "audit_logging": effective.audit_logging,
                "retention_days": effective.retention_days,
                "access_control_level": effective.access_control_level,
                "mfa_required": effective.mfa_required,
                "tls_version": effective.tls_version,
                "session_timeout_hours": effective.session_timeout_hours,
            },
        )
    except (ConfigPatchError, OSError) as e:
        raise DegradedStepWarning(f"Applying {effective.compliance.value} overrides failed: {e}") from e
    return f"{effective.compliance.value} policy applied"


def verify_reachability(ctx: StepContext) -> str:
    effective = ctx.effective
    network = effective.network
    deadline = ctx.clock() + ctx.reachability_timeout
    status: Optional[Any] = None

    while True:
        status = ctx.monitor.check(network.bind_address, network.port, pid_file=effective.paths.pid_file)
        if status.healthy:
            return f"https://{network.dns_name}:{network.port}/ is reachable"
        if ctx.clock() + ctx.poll_interval > deadline:
            break
        InstallerLogger.debug(f"Waiting for Velociraptor ({status.describe()})")
        ctx.sleep(ctx.poll_interval)

    raise ReachabilityTimeout(
        f"Velociraptor was not reachable within {ctx.reachability_timeout:g} seconds ({status.describe()})",
        remediation="Check port availability",
    )
