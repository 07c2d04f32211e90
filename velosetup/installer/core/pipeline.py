#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Fixed-order installation pipeline.

Order:
  1) PrerequisiteCheck         (fatal)
  2) AcquireBinary             (fatal)
  3) GenerateBaseConfig        (fatal)
  4) PatchConfig               (fatal)
  5) ProvisionCredentials      (non-fatal)
  6) InstallServiceOrProcess   (non-fatal)
  7) ConfigureArtifactPacks    (non-fatal)
  8) ApplyComplianceOverrides  (non-fatal)
  9) VerifyReachability        (fatal)

A fatal failure halts the run; no later step is attempted. Non-fatal failures
are recorded as warnings and the run continues. The run succeeds only when
VerifyReachability does.
"""

import time

from typing import Callable, Dict, Optional

from velosetup.installer.actions import shared as shared_actions
from velosetup.installer.configs.constants.constants import (
    INSTALL_STEP_ORDER,
    REACHABILITY_POLL_INTERVAL_SECONDS,
    REACHABILITY_TIMEOUT_SECONDS,
)
from velosetup.installer.configs.constants.enums import InstallerResult, StepName
from velosetup.installer.core.effective_config import EffectiveConfiguration
from velosetup.installer.core.install_run import InstallationRun, StepResult
from velosetup.installer.utils.exceptions import DegradedStepWarning, FatalStepError
from velosetup.installer.utils.logger_utils import InstallerLogger

StepCallback = Callable[[StepResult], None]

STEP_ACTIONS: Dict[StepName, Callable[[shared_actions.StepContext], str]] = {
    StepName.PREREQUISITE_CHECK: shared_actions.prerequisite_check,
    StepName.ACQUIRE_BINARY: shared_actions.acquire_binary,
    StepName.GENERATE_BASE_CONFIG: shared_actions.generate_base_config,
    StepName.PATCH_CONFIG: shared_actions.patch_config,
    StepName.PROVISION_CREDENTIALS: shared_actions.provision_credentials,
    StepName.INSTALL_SERVICE_OR_PROCESS: shared_actions.install_service_or_process,
    StepName.CONFIGURE_ARTIFACT_PACKS: shared_actions.configure_artifact_packs,
    StepName.APPLY_COMPLIANCE_OVERRIDES: shared_actions.apply_compliance_overrides,
    StepName.VERIFY_REACHABILITY: shared_actions.verify_reachability,
}


class InstallationPipeline:
    """Runs the installation steps against one EffectiveConfiguration."""

    def __init__(
        self,
        platform,
        monitor,
        release_client,
        reachability_timeout: float = REACHABILITY_TIMEOUT_SECONDS,
        poll_interval: float = REACHABILITY_POLL_INTERVAL_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
        actions: Optional[Dict[StepName, Callable[[shared_actions.StepContext], str]]] = None,
    ):
        self.platform = platform
        self.monitor = monitor
        self.release_client = release_client
        self.reachability_timeout = reachability_timeout
        self.poll_interval = poll_interval
        self.sleep = sleep
        self.clock = clock
        self.actions = {**STEP_ACTIONS, **(actions or {})}

    def new_run(self, effective: EffectiveConfiguration) -> InstallationRun:
        return InstallationRun(effective=effective)

    def run(
        self,
        effective: EffectiveConfiguration,
        run: Optional[InstallationRun] = None,
        on_step: Optional[StepCallback] = None,
    ) -> InstallationRun:
        """Execute every step in order and return the finished run."""
        run = run or self.new_run(effective)
        ctx = shared_actions.StepContext(
            effective=effective,
            platform=self.platform,
            monitor=self.monitor,
            release_client=self.release_client,
            reachability_timeout=self.reachability_timeout,
            poll_interval=self.poll_interval,
            sleep=self.sleep,
            clock=self.clock,
        )

        def _emit(step: StepResult):
            if on_step:
                try:
                    on_step(step)
                except Exception as e:
                    InstallerLogger.error(f"Error in step observer for {step.name.value}: {e}")

        run.mark_running()
        InstallerLogger.start(f"Installation {run.id}")
        succeeded = False

        for name in INSTALL_STEP_ORDER:
            step = StepResult.for_step(name)
            run.steps.append(step)
            step.mark_running()
            InstallerLogger.start(name.value)
            _emit(step)

            warnings_before = len(ctx.warnings)
            halt = False
            try:
                message = self.actions[name](ctx)
                step.mark_succeeded(message)
                degraded = len(ctx.warnings) > warnings_before
                InstallerLogger.end(
                    name.value,
                    InstallerResult.WARNING if degraded else InstallerResult.SUCCESS,
                    message,
                )
            except FatalStepError as e:
                step.mark_failed(str(e))
                if step.fatal:
                    InstallerLogger.end(name.value, InstallerResult.FAILURE, str(e))
                    if e.remediation:
                        InstallerLogger.info(f"Suggestion: {e.remediation}")
                    halt = True
                else:
                    ctx.warn(f"{name.value}: {e}")
                    InstallerLogger.end(name.value, InstallerResult.WARNING, str(e))
            except DegradedStepWarning as e:
                step.mark_failed(str(e))
                ctx.warn(f"{name.value}: {e}")
                InstallerLogger.end(name.value, InstallerResult.WARNING, str(e))
            except Exception as e:
                # anything unexpected is fatal for a fatal step and a warning otherwise
                step.mark_failed(f"Unexpected error: {e}")
                if step.fatal:
                    InstallerLogger.end(name.value, InstallerResult.FAILURE, f"Unexpected error: {e}")
                    halt = True
                else:
                    ctx.warn(f"{name.value}: unexpected error: {e}")
                    InstallerLogger.end(name.value, InstallerResult.WARNING, f"Unexpected error: {e}")

            for warning in ctx.warnings[warnings_before:]:
                run.add_warning(warning)
            _emit(step)

            if halt:
                break
            if name == StepName.VERIFY_REACHABILITY:
                succeeded = step.succeeded

        run.finish(succeeded)
        if succeeded:
            InstallerLogger.end(
                f"Installation {run.id}",
                InstallerResult.WARNING if run.warnings else InstallerResult.SUCCESS,
                f"Completed with {len(run.warnings)} warning(s)" if run.warnings else "Completed",
            )
        else:
            failed = run.failed_step
            InstallerLogger.end(
                f"Installation {run.id}",
                InstallerResult.FAILURE,
                f"Failed at {failed.name.value}" if failed else "Failed",
            )
        return run
