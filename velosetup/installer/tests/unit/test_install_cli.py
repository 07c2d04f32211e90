#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Unit tests for command-line parsing and settings loading."""

import argparse
import io
import json
import os
import shutil
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest.mock import patch

from velosetup import install
from velosetup.velo_constants import SecurityLevel
from velosetup.installer.configs.constants.settings_keys import (
    KEY_SETTING_INSTALL_DIR,
    KEY_SETTING_PORT,
    KEY_SETTING_SECURITY_LEVEL,
)
from velosetup.installer.utils.exceptions import ConfigValueValidationError
from velosetup.installer.utils.logger_utils import InstallerLogger


def parse(argv):
    parser = argparse.ArgumentParser()
    install.build_arg_parser(parser)
    return parser.parse_args(argv)


class TestLoadSettings(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_overrides_applied_after_file(self):
        path = os.path.join(self.temp_dir, "settings.json")
        with open(path, "w") as f:
            json.dump({"settings": {KEY_SETTING_PORT: 9000, KEY_SETTING_SECURITY_LEVEL: "Basic"}}, f)

        store = install.load_settings(
            parse(
                [
                    "--settings",
                    path,
                    "--set",
                    f"{KEY_SETTING_PORT}=9100",
                    "--install-dir",
                    self.temp_dir,
                ]
            )
        )

        self.assertEqual(store.get_value(KEY_SETTING_PORT), 9100)
        self.assertEqual(store.get_value(KEY_SETTING_SECURITY_LEVEL), SecurityLevel.BASIC)
        self.assertEqual(store.get_value(KEY_SETTING_INSTALL_DIR), self.temp_dir)

    def test_override_without_equals_rejected(self):
        with self.assertRaises(ConfigValueValidationError):
            install.load_settings(parse(["--set", "network.port"]))

    def test_operations_are_mutually_exclusive(self):
        with redirect_stdout(io.StringIO()), patch("sys.stderr", new_callable=io.StringIO):
            with self.assertRaises(SystemExit):
                parse(["--status", "--stop"])


class TestRunCli(unittest.TestCase):
    def tearDown(self):
        # --quiet flips class-level logger state
        InstallerLogger.set_console_output(True)

    def run_cli(self, *argv):
        out = io.StringIO()
        with patch("sys.argv", ["install.py", *argv]), redirect_stdout(out):
            with self.assertRaises(SystemExit) as cm:
                install.run_cli()
        return cm.exception.code, out.getvalue()

    def test_validate_only_success(self):
        code, out = self.run_cli("--quiet", "--validate-only")
        self.assertEqual(code, install.EXIT_OK)
        self.assertIn("Security Level", out)

    def test_validate_only_invalid(self):
        code, _ = self.run_cli("--quiet", "--validate-only", "--set", f"{KEY_SETTING_PORT}=80")
        self.assertEqual(code, install.EXIT_INVALID_SETTINGS)

    def test_unknown_setting(self):
        code, _ = self.run_cli("--quiet", "--validate-only", "--set", "bogus.key=1")
        self.assertEqual(code, install.EXIT_INVALID_SETTINGS)

    def test_purge_requires_uninstall(self):
        with patch("sys.stderr", new_callable=io.StringIO):
            code, _ = self.run_cli("--quiet", "--purge")
        self.assertEqual(code, 2)


if __name__ == "__main__":
    unittest.main()
