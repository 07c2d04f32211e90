#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Centralized constants for the installation pipeline and its shared actions."""

from velosetup.installer.configs.constants.enums import StepName

# Fixed execution order and fatal policy of the installation steps
INSTALL_STEP_ORDER = (
    StepName.PREREQUISITE_CHECK,
    StepName.ACQUIRE_BINARY,
    StepName.GENERATE_BASE_CONFIG,
    StepName.PATCH_CONFIG,
    StepName.PROVISION_CREDENTIALS,
    StepName.INSTALL_SERVICE_OR_PROCESS,
    StepName.CONFIGURE_ARTIFACT_PACKS,
    StepName.APPLY_COMPLIANCE_OVERRIDES,
    StepName.VERIFY_REACHABILITY,
)

FATAL_STEPS = frozenset(
    {
        StepName.PREREQUISITE_CHECK,
        StepName.ACQUIRE_BINARY,
        StepName.GENERATE_BASE_CONFIG,
        StepName.PATCH_CONFIG,
        StepName.VERIFY_REACHABILITY,
    }
)

# Reachability polling
REACHABILITY_TIMEOUT_SECONDS = 30
REACHABILITY_POLL_INTERVAL_SECONDS = 2
PROBE_CONNECT_TIMEOUT_SECONDS = 3

# Release discovery/download
RELEASE_DISCOVERY_TIMEOUT_SECONDS = 30
RELEASE_DOWNLOAD_TIMEOUT_SECONDS = 300
DOWNLOAD_SUFFIX = ".download"

# External process invocations
BINARY_COMMAND_TIMEOUT_SECONDS = 120
BINARY_CONFIG_GENERATE = ("config", "generate")
BINARY_USER_ADD = ("user", "add")
BINARY_ADMIN_ROLE = "administrator"
BINARY_FRONTEND = "frontend"

# Base configuration sections that must be present (or creatable) for a successful patch
MANDATORY_CONFIG_SECTIONS = ("GUI", "Frontend", "Datastore", "Logging")

# AsyncRunner host-thread pump cadence
ASYNC_PUMP_INTERVAL_MS = 100

# Remediation hints keyed by failed step
REMEDIATION_SUGGESTIONS = {
    StepName.PREREQUISITE_CHECK: [
        "Check port availability",
        "Verify administrator rights",
        "Free at least 1 GiB of disk space in the install directory",
    ],
    StepName.ACQUIRE_BINARY: [
        "Check network connectivity to api.github.com",
        "Place a velociraptor binary in the install bin directory to skip the download",
    ],
    StepName.GENERATE_BASE_CONFIG: [
        "Verify the velociraptor binary runs on this platform",
        "Check write permissions on the install directory",
    ],
    StepName.PATCH_CONFIG: [
        "Check write permissions on the configuration file",
        "Regenerate the base configuration",
    ],
    StepName.PROVISION_CREDENTIALS: [
        "Add the administrator manually with 'velociraptor --config <config> user add'",
    ],
    StepName.INSTALL_SERVICE_OR_PROCESS: [
        "Verify administrator rights",
        "Check the service manager (systemd/launchd) logs",
    ],
    StepName.CONFIGURE_ARTIFACT_PACKS: [
        "Check write permissions on the install directory",
    ],
    StepName.APPLY_COMPLIANCE_OVERRIDES: [
        "Check write permissions on the configuration file",
    ],
    StepName.VERIFY_REACHABILITY: [
        "Check port availability",
        "Check firewall rules for the GUI port",
        "Inspect the velociraptor process log",
    ],
}
