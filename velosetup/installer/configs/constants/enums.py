#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.


from enum import Enum, auto


# Used primarily for getting status from discrete steps during the installer and subsequently logging
class InstallerResult(Enum):
    """Return status for an installation step."""

    SUCCESS = auto()
    FAILURE = auto()
    WARNING = auto()
    SKIPPED = auto()


#####################################################
# Installation run enums
#####################################################


class RunStatus(Enum):
    PENDING = "Pending"
    RUNNING = "Running"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"

    def is_terminal(self) -> bool:
        return self in (RunStatus.SUCCEEDED, RunStatus.FAILED)


class StepStatus(Enum):
    NOT_STARTED = "NotStarted"
    RUNNING = "Running"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"

    def is_terminal(self) -> bool:
        return self in (StepStatus.SUCCEEDED, StepStatus.FAILED)


class StepName(Enum):
    """The fixed installation steps, in execution order."""

    PREREQUISITE_CHECK = "PrerequisiteCheck"
    ACQUIRE_BINARY = "AcquireBinary"
    GENERATE_BASE_CONFIG = "GenerateBaseConfig"
    PATCH_CONFIG = "PatchConfig"
    PROVISION_CREDENTIALS = "ProvisionCredentials"
    INSTALL_SERVICE_OR_PROCESS = "InstallServiceOrProcess"
    CONFIGURE_ARTIFACT_PACKS = "ConfigureArtifactPacks"
    APPLY_COMPLIANCE_OVERRIDES = "ApplyComplianceOverrides"
    VERIFY_REACHABILITY = "VerifyReachability"


class HealthCheckResult(Enum):
    PASS = "PASS"
    WARN = "WARN"
    FAIL = "FAIL"


class OverallHealth(Enum):
    HEALTHY = "HEALTHY"
    HEALTHY_WITH_WARNINGS = "HEALTHY (with warnings)"
    UNHEALTHY = "UNHEALTHY"
