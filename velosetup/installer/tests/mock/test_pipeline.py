#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Mock tests for the installation pipeline: ordering, fatal halts and degraded steps."""

import os
import unittest

from velosetup.velo_common import LoadYaml
from velosetup.installer.configs.constants.constants import INSTALL_STEP_ORDER
from velosetup.installer.configs.constants.enums import RunStatus, StepName, StepStatus
from velosetup.installer.configs.constants.settings_keys import (
    KEY_SETTING_COMPLIANCE_FRAMEWORK,
    KEY_SETTING_DEPLOYMENT_TIER,
    KEY_SETTING_PORT,
    KEY_SETTING_SECURITY_LEVEL,
)
from velosetup.installer.tests.mock.test_framework import (
    BaseInstallerTest,
    FakeMonitor,
    FakeReleaseClient,
)


class TestPipelineSuccess(BaseInstallerTest):
    def test_default_settings_complete_every_step(self):
        effective = self.create_effective()
        run = self.create_pipeline().run(effective)

        self.assertEqual(run.status, RunStatus.SUCCEEDED)
        self.assertEqual([s.name for s in run.steps], list(INSTALL_STEP_ORDER))
        self.assertTrue(all(s.status == StepStatus.SUCCEEDED for s in run.steps))
        self.assertEqual(run.warnings, [])

        self.assertEqual(effective.max_clients, 50)
        self.assertEqual(effective.tls_version, "1.3")
        self.assertFalse(effective.mfa_required)

    def test_steps_start_in_order_and_reachability_is_last(self):
        run = self.create_pipeline().run(self.create_effective())

        started = [s.started_at for s in run.steps]
        self.assertEqual(started, sorted(started))
        for step in run.steps:
            self.assertLessEqual(step.started_at, step.finished_at)
        self.assertEqual(run.steps[-1].name, StepName.VERIFY_REACHABILITY)

    def test_on_step_sees_running_then_terminal(self):
        seen = []
        self.create_pipeline().run(
            self.create_effective(),
            on_step=lambda step: seen.append((step.name, step.status)),
        )
        self.assertEqual(len(seen), 2 * len(INSTALL_STEP_ORDER))
        self.assertEqual(seen[0], (StepName.PREREQUISITE_CHECK, StepStatus.RUNNING))
        self.assertEqual(seen[-1], (StepName.VERIFY_REACHABILITY, StepStatus.SUCCEEDED))

    def test_config_is_generated_and_patched(self):
        effective = self.create_effective(**{KEY_SETTING_PORT: 9443})
        self.create_pipeline().run(effective)

        with open(effective.paths.config_path) as f:
            text = f.read()
        self.assertIn("bind_port: 9443", text)
        self.assertIn(f"location: {effective.paths.datastore_dir}", text)
        # untouched content survives
        self.assertIn("nonce: abc123", text)
        self.assertEqual(oct(os.stat(effective.paths.config_path).st_mode & 0o777), "0o600")

    def test_credentials_provisioned_with_binary(self):
        effective = self.create_effective()
        self.create_pipeline().run(effective)

        commands = self.mock_platform.commands_containing("user add")
        self.assertEqual(len(commands), 1)
        self.assertIn(f"user add {effective.credentials.username}", commands[0])
        self.assertIn("--role administrator", commands[0])

    def test_existing_binary_is_reused(self):
        effective = self.create_effective()
        os.makedirs(os.path.dirname(effective.paths.binary_path))
        with open(effective.paths.binary_path, "wb") as f:
            f.write(b"binary")

        run = self.create_pipeline().run(effective)

        self.assertEqual(run.status, RunStatus.SUCCEEDED)
        self.assertEqual(self.release_client.acquired, [])
        self.assertIn("existing", run.get_step(StepName.ACQUIRE_BINARY).message)

    def test_artifact_packs_written_to_policy_file(self):
        effective = self.create_effective()
        self.create_pipeline().run(effective)

        policy = LoadYaml(effective.paths.policy_file)
        self.assertEqual(policy["artifacts"]["ids"], list(effective.artifact_ids))
        self.assertEqual(policy["deployment"]["tier"], "Standalone")
        self.assertNotIn("compliance", policy)

    def test_compliance_overrides_applied(self):
        effective = self.create_effective(
            **{
                KEY_SETTING_COMPLIANCE_FRAMEWORK: "HIPAA",
                KEY_SETTING_SECURITY_LEVEL: "Basic",
            }
        )
        run = self.create_pipeline().run(effective)

        self.assertEqual(run.status, RunStatus.SUCCEEDED)
        policy = LoadYaml(effective.paths.policy_file)
        self.assertEqual(policy["compliance"]["framework"], "HIPAA")
        self.assertTrue(policy["compliance"]["mfa_required"])
        self.assertEqual(policy["compliance"]["session_timeout_hours"], 2)
        with open(effective.paths.config_path) as f:
            self.assertIn(f"max_age: {2190 * 86400}", f.read())


class TestPipelineFatalFailures(BaseInstallerTest):
    def test_binary_acquisition_failure_halts_after_two_steps(self):
        self.release_client = FakeReleaseClient(fail=True)
        run = self.create_pipeline().run(self.create_effective())

        self.assertEqual(run.status, RunStatus.FAILED)
        self.assertEqual(len(run.steps), 2)
        self.assertEqual(run.steps[0].status, StepStatus.SUCCEEDED)
        self.assertEqual(run.steps[1].name, StepName.ACQUIRE_BINARY)
        self.assertEqual(run.steps[1].status, StepStatus.FAILED)
        self.assertFalse(run.steps[1].retryable)
        self.assertEqual(run.failed_step.name, StepName.ACQUIRE_BINARY)
        self.assertEqual(self.mock_platform.executed_commands, [])

    def test_port_in_use_fails_prerequisites(self):
        self.port_free_mock.return_value = False
        run = self.create_pipeline().run(self.create_effective())

        self.assertEqual(run.status, RunStatus.FAILED)
        self.assertEqual(len(run.steps), 1)
        self.assertIn("already in use", run.steps[0].message)

    def test_service_without_privilege_fails_prerequisites(self):
        self.mock_platform.privileged = False
        run = self.create_pipeline().run(self.create_effective(**{KEY_SETTING_DEPLOYMENT_TIER: "Server"}))

        self.assertEqual(run.status, RunStatus.FAILED)
        self.assertEqual(run.failed_step.name, StepName.PREREQUISITE_CHECK)
        self.assertIn("Administrator rights", run.failed_step.message)

    def test_low_disk_space_fails_prerequisites(self):
        self.disk_free_mock.return_value = 1024
        run = self.create_pipeline().run(self.create_effective())

        self.assertEqual(run.failed_step.name, StepName.PREREQUISITE_CHECK)

    def test_config_generate_failure_halts(self):
        self.mock_platform.set_command_result("config generate", 1, ["illegal instruction"])
        run = self.create_pipeline().run(self.create_effective())

        self.assertEqual(run.status, RunStatus.FAILED)
        self.assertEqual(run.steps[-1].name, StepName.GENERATE_BASE_CONFIG)
        self.assertIn("illegal instruction", run.steps[-1].message)

    def test_empty_config_output_halts(self):
        self.mock_platform.set_command_result("config generate", 0, [])
        run = self.create_pipeline().run(self.create_effective())

        self.assertEqual(run.failed_step.name, StepName.GENERATE_BASE_CONFIG)

    def test_reachability_timeout(self):
        self.monitor = FakeMonitor([FakeMonitor.DOWN])
        run = self.create_pipeline(reachability_timeout=10, poll_interval=2).run(self.create_effective())

        self.assertEqual(run.status, RunStatus.FAILED)
        step = run.steps[-1]
        self.assertEqual(step.name, StepName.VERIFY_REACHABILITY)
        self.assertEqual(step.status, StepStatus.FAILED)
        self.assertIn("not reachable within 10 seconds", step.message)
        self.assertEqual(self.clock.sleeps, [2, 2, 2, 2, 2])
        self.assertEqual(self.monitor.checks, 6)

    def test_reachability_polls_until_healthy(self):
        self.monitor = FakeMonitor([FakeMonitor.DOWN, FakeMonitor.DOWN, FakeMonitor.HEALTHY])
        run = self.create_pipeline().run(self.create_effective())

        self.assertEqual(run.status, RunStatus.SUCCEEDED)
        self.assertEqual(self.monitor.checks, 3)
        self.assertEqual(len(self.clock.sleeps), 2)

    def test_unexpected_error_in_fatal_step_halts(self):
        def explode(ctx):
            raise RuntimeError("disk on fire")

        run = self.create_pipeline(actions={StepName.PATCH_CONFIG: explode}).run(self.create_effective())

        self.assertEqual(run.status, RunStatus.FAILED)
        self.assertEqual(run.steps[-1].name, StepName.PATCH_CONFIG)
        self.assertIn("disk on fire", run.steps[-1].message)


class TestPipelineNonFatalFailures(BaseInstallerTest):
    def test_credential_failure_is_a_warning(self):
        self.mock_platform.set_command_result("user add", 1, ["user already exists"])
        run = self.create_pipeline().run(self.create_effective())

        self.assertEqual(run.status, RunStatus.SUCCEEDED)
        step = run.get_step(StepName.PROVISION_CREDENTIALS)
        self.assertEqual(step.status, StepStatus.FAILED)
        self.assertTrue(step.retryable)
        self.assertEqual(len(run.warnings), 1)
        self.assertIn("user already exists", run.warnings[0])
        self.assertEqual(run.steps[-1].name, StepName.VERIFY_REACHABILITY)

    def test_service_failure_falls_back_to_process(self):
        self.mock_platform.register_result = (False, "systemctl enable failed")
        effective = self.create_effective(**{KEY_SETTING_DEPLOYMENT_TIER: "Server"})
        run = self.create_pipeline().run(effective)

        self.assertEqual(run.status, RunStatus.SUCCEEDED)
        step = run.get_step(StepName.INSTALL_SERVICE_OR_PROCESS)
        self.assertEqual(step.status, StepStatus.SUCCEEDED)
        self.assertEqual(self.mock_platform.register_calls, 1)
        self.assertEqual(len(self.mock_platform.started_pids), 1)
        self.assertEqual(len(run.warnings), 1)
        self.assertIn("falling back", run.warnings[0])

    def test_service_registration_preferred_for_server_tier(self):
        run = self.create_pipeline().run(self.create_effective(**{KEY_SETTING_DEPLOYMENT_TIER: "Server"}))

        self.assertEqual(run.status, RunStatus.SUCCEEDED)
        self.assertEqual(self.mock_platform.register_calls, 1)
        self.assertEqual(self.mock_platform.started_pids, [])

    def test_service_path_clears_leftover_pid_file(self):
        effective = self.create_effective(**{KEY_SETTING_DEPLOYMENT_TIER: "Server"})
        os.makedirs(os.path.dirname(effective.paths.pid_file), exist_ok=True)
        with open(effective.paths.pid_file, "w") as f:
            f.write("999999\n")

        run = self.create_pipeline().run(effective)

        self.assertEqual(run.status, RunStatus.SUCCEEDED)
        self.assertEqual(self.mock_platform.register_calls, 1)
        self.assertIn(effective.paths.pid_file, self.mock_platform.stopped_pid_files)
        self.assertFalse(os.path.exists(effective.paths.pid_file))

    def test_standalone_runs_foreground_process(self):
        effective = self.create_effective()
        self.create_pipeline().run(effective)

        self.assertEqual(self.mock_platform.register_calls, 0)
        self.assertEqual(len(self.mock_platform.started_pids), 1)
        self.assertIn(effective.paths.pid_file, self.mock_platform.stopped_pid_files)

    def test_process_start_error_is_a_warning(self):
        self.mock_platform.start_error = OSError("exec format error")
        run = self.create_pipeline().run(self.create_effective())

        step = run.get_step(StepName.INSTALL_SERVICE_OR_PROCESS)
        self.assertEqual(step.status, StepStatus.FAILED)
        self.assertIn("exec format error", step.message)
        # the monitor is faked, so reachability still decides the outcome
        self.assertEqual(run.status, RunStatus.SUCCEEDED)

    def test_unexpected_error_in_non_fatal_step_continues(self):
        def explode(ctx):
            raise RuntimeError("yaml exploded")

        run = self.create_pipeline(actions={StepName.CONFIGURE_ARTIFACT_PACKS: explode}).run(self.create_effective())

        self.assertEqual(run.status, RunStatus.SUCCEEDED)
        self.assertEqual(len(run.steps), len(INSTALL_STEP_ORDER))
        self.assertTrue(any("yaml exploded" in w for w in run.warnings))


if __name__ == "__main__":
    unittest.main()
