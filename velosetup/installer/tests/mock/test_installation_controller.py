#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Mock tests for the installation controller and its view updates."""

import unittest

from velosetup.installer.configs.constants.enums import RunStatus
from velosetup.installer.configs.constants.settings_keys import (
    KEY_SETTING_ADMIN_USERNAME,
    KEY_SETTING_PORT,
    KEY_SETTING_SECURITY_LEVEL,
)
from velosetup.installer.controllers import InstallationController
from velosetup.installer.core.validation import PORT_RANGE_MESSAGE
from velosetup.installer.tests.mock.test_framework import BaseInstallerTest, FakeMonitor
from velosetup.installer.utils.exceptions import ValidationError


class RecordingView:
    def __init__(self):
        self.calls = []

    def __getattr__(self, name):
        if name.startswith("update_"):
            return lambda *args: self.calls.append((name, args))
        raise AttributeError(name)

    def called(self, name):
        return [args for method, args in self.calls if method == name]


class TestInstallationController(BaseInstallerTest):
    def create_controller(self, store=None, **kwargs):
        self.store = store or self.create_store()
        return InstallationController(
            self.store,
            platform=self.mock_platform,
            monitor=self.monitor,
            release_client=self.release_client,
            pipeline=self.create_pipeline(),
            platform_name="Linux",
            **kwargs,
        )

    def test_start_refused_for_invalid_settings(self):
        controller = self.create_controller(self.create_store(**{KEY_SETTING_PORT: 80}))

        with self.assertRaises(ValidationError) as cm:
            controller.start()

        self.assertEqual(len(cm.exception.issues), 1)
        self.assertEqual(cm.exception.issues[0].message, PORT_RANGE_MESSAGE)
        self.assertIsNone(controller.current_run())
        self.assertEqual(self.mock_platform.executed_commands, [])

    def test_validate_reports_every_issue(self):
        controller = self.create_controller()
        self.store.set_value(KEY_SETTING_PORT, 80)
        self.store.set_value(KEY_SETTING_ADMIN_USERNAME, "")
        self.store.set_value("network.bind_address", "not-an-ip")

        ok, summary = controller.validate()

        self.assertFalse(ok)
        self.assertEqual(len(controller.validation_issues()), 3)
        self.assertIn(PORT_RANGE_MESSAGE, summary)

    def test_start_and_wait(self):
        controller = self.create_controller()
        view = RecordingView()
        controller.set_view(view)
        completed = []
        controller.observe_completion(completed.append)

        run = controller.start()
        self.assertIsNotNone(run)
        self.assertTrue(controller.wait(10))

        self.assertEqual(controller.current_run().status, RunStatus.SUCCEEDED)
        self.assertEqual(completed, [run])
        self.assertTrue(view.called("update_step"))
        output = view.called("update_installation_output")
        self.assertEqual(len(output), 1)
        self.assertIn("Web interface: https://localhost:8889/", output[0][0])
        self.assertEqual(controller.remediation_suggestions(), [])

    def test_failed_run_offers_suggestions(self):
        self.monitor = FakeMonitor([FakeMonitor.DOWN])
        controller = self.create_controller()

        controller.start()
        controller.wait(10)

        self.assertEqual(controller.current_run().status, RunStatus.FAILED)
        self.assertIn("Check port availability", controller.remediation_suggestions())

    def test_settings_change_updates_effective_preview(self):
        controller = self.create_controller()
        previews = []
        controller.observe_effective_config(previews.append)

        controller.update_setting(KEY_SETTING_SECURITY_LEVEL, "Maximum")

        self.assertEqual(len(previews), 1)
        self.assertTrue(previews[0].mfa_required)
        self.assertEqual(previews[0].session_timeout_hours, 4)

    def test_update_setting_rejects_unknown_key(self):
        controller = self.create_controller()
        ok, message = controller.update_setting("network.nonexistent", 1)
        self.assertFalse(ok)
        self.assertIn("not found", message)

    def test_status_uses_monitor(self):
        controller = self.create_controller()
        self.assertTrue(controller.status().healthy)
        self.assertEqual(self.monitor.checks, 1)

    def test_stop_stops_process(self):
        controller = self.create_controller()
        controller.start()
        controller.wait(10)

        self.assertTrue(controller.stop())
        pid_file = controller.effective_configuration(validate=False).paths.pid_file
        self.assertIn(pid_file, self.mock_platform.stopped_pid_files)


if __name__ == "__main__":
    unittest.main()
