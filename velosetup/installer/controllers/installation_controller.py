#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""
Installation Controller for the Velociraptor installer
======================================================

This module provides the controller that validates settings, starts the
installation pipeline off the interactive thread, mirrors its progress to the
view, and exposes stop/status/health for an existing deployment.
"""

from typing import Any, Callable, List, Optional, Tuple

from velosetup.installer.actions import cleanup
from velosetup.installer.actions.monitor import DeploymentMonitor, HealthReport, MonitorStatus
from velosetup.installer.actions.release import ReleaseClient
from velosetup.installer.configs.constants.constants import REACHABILITY_TIMEOUT_SECONDS
from velosetup.installer.core.async_runner import AsyncRunner
from velosetup.installer.core.derivation import derive
from velosetup.installer.core.effective_config import EffectiveConfiguration
from velosetup.installer.core.install_run import InstallationRun, StepResult
from velosetup.installer.core.observable import OBSERVE_ALL_KEYS
from velosetup.installer.core.pipeline import InstallationPipeline
from velosetup.installer.core.settings_store import SettingsStore
from velosetup.installer.core.validation import format_validation_summary, validate_settings, ValidationIssue
from velosetup.installer.utils.exceptions import ValidationError
from velosetup.installer.utils.logger_utils import InstallerLogger
from velosetup.installer.utils.summary_utils import build_run_summary_lines, get_remediation_suggestions

from .base_controller import BaseController


class InstallationController(BaseController):
    """
    Controller for managing the Velociraptor installation process.

    The platform installer, monitor and release client may be injected (tests
    use fakes); otherwise the ones for the current host are created.
    """

    def __init__(
        self,
        model: SettingsStore,
        platform=None,
        monitor=None,
        release_client=None,
        pipeline: Optional[InstallationPipeline] = None,
        scheduler=None,
        platform_name: Optional[str] = None,
        reachability_timeout: float = REACHABILITY_TIMEOUT_SECONDS,
        debug: bool = False,
    ):
        super().__init__(model)

        if platform is None:
            from velosetup.installer.platforms import get_platform_installer

            platform = get_platform_installer(debug)

        self.platform = platform
        self.platform_name = platform_name
        self.monitor = monitor or DeploymentMonitor()
        self.release_client = release_client or ReleaseClient(debug=debug)
        self.pipeline = pipeline or InstallationPipeline(
            self.platform,
            self.monitor,
            self.release_client,
            reachability_timeout=reachability_timeout,
        )
        self.runner = AsyncRunner(
            self.pipeline,
            scheduler=scheduler,
            on_step=self._handle_step,
            on_complete=self._handle_complete,
        )

        self.last_run: Optional[InstallationRun] = None
        self.installation_message = ""
        self._step_observers: List[Callable[[StepResult], None]] = []
        self._effective_observers: List[Callable[[Optional[EffectiveConfiguration]], None]] = []
        self._complete_observers: List[Callable[[InstallationRun], None]] = []

        self.model.observe(OBSERVE_ALL_KEYS, self._on_setting_changed)

    ###############################################################################################
    # observer hooks
    def observe_steps(self, callback: Callable[[StepResult], None]):
        self._step_observers.append(callback)

    def observe_effective_config(self, callback: Callable[[Optional[EffectiveConfiguration]], None]):
        self._effective_observers.append(callback)

    def observe_completion(self, callback: Callable[[InstallationRun], None]):
        self._complete_observers.append(callback)

    def _on_setting_changed(self, key: str, value: Any):
        # preview only; settings may be mid-edit and invalid
        try:
            effective = self.effective_configuration(validate=False)
        except Exception as e:
            InstallerLogger.debug(f"Unable to derive configuration after change to {key}: {e}")
            effective = None
        for callback in list(self._effective_observers):
            try:
                callback(effective)
            except Exception as e:
                InstallerLogger.error(f"Error in configuration observer: {e}")
        self._call_view("update_effective_config", effective)

    def _handle_step(self, step: StepResult):
        self.installation_message = step.describe()
        for callback in list(self._step_observers):
            try:
                callback(step)
            except Exception as e:
                InstallerLogger.error(f"Error in step observer: {e}")
        self._call_view("update_step", step)
        self.refresh_view()

    def _handle_complete(self, run: InstallationRun):
        self.last_run = run
        self.installation_message = f"Installation {run.status.value.lower()}"
        for callback in list(self._complete_observers):
            try:
                callback(run)
            except Exception as e:
                InstallerLogger.error(f"Error in completion observer: {e}")
        self._call_view("update_installation_output", "\n".join(build_run_summary_lines(run)))
        self._call_view("update_remediation", get_remediation_suggestions(run))
        self.refresh_view()

    def refresh_view(self):
        if not self.view:
            return
        run = self.current_run()
        status = run.status.value if run else "Not Started"
        self._call_view("update_installation_status", status, self.installation_message)

    ###############################################################################################
    # settings
    def validation_issues(self) -> List[ValidationIssue]:
        return validate_settings(self.model)

    def validate(self) -> Tuple[bool, str]:
        issues = self.validation_issues()
        return (not issues), format_validation_summary(issues)

    def effective_configuration(self, validate: bool = True) -> EffectiveConfiguration:
        return derive(self.model, validate=validate, platform_name=self.platform_name)

    ###############################################################################################
    # installation
    def current_run(self) -> Optional[InstallationRun]:
        return self.runner.current_run or self.last_run

    def is_installing(self) -> bool:
        return self.runner.is_running()

    def start(self) -> Optional[InstallationRun]:
        """Validate, snapshot the settings, and trigger a run.

        Returns the new run, or None if one is already in progress.

        Raises:
            ValidationError: If the settings have validation issues (no run is created).
        """
        if self.runner.is_running():
            InstallerLogger.warning("Installation is already in progress")
            return None

        issues = self.validation_issues()
        if issues:
            self.installation_message = format_validation_summary(issues)
            self.refresh_view()
            raise ValidationError(issues)

        effective = self.effective_configuration(validate=False)
        run = self.runner.trigger(effective)
        if run is not None:
            self.installation_message = "Starting installation..."
            self.refresh_view()
        return run

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the active run finishes, then deliver pending events."""
        finished = self.runner.wait(timeout)
        self.runner.pump()
        return finished

    def pump(self) -> bool:
        return self.runner.pump()

    def remediation_suggestions(self) -> List[str]:
        run = self.current_run()
        return get_remediation_suggestions(run) if run else []

    ###############################################################################################
    # existing deployment
    def stop(self) -> bool:
        """Stop the managed service/process (an in-flight run is not cancelled)."""
        return cleanup.stop_deployment(self.effective_configuration(validate=False), self.platform)

    def uninstall(self, purge: bool = False) -> bool:
        return cleanup.uninstall(self.effective_configuration(validate=False), self.platform, purge=purge)

    def status(self) -> MonitorStatus:
        effective = self.effective_configuration(validate=False)
        return self.monitor.check(
            effective.network.bind_address,
            effective.network.port,
            pid_file=effective.paths.pid_file,
        )

    def health(self) -> HealthReport:
        return self.monitor.health_report(self.effective_configuration(validate=False))
