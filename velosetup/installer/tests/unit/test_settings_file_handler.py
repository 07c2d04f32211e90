#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Unit tests for importing and exporting settings files."""

import json
import os
import shutil
import tempfile
import unittest

from velosetup.velo_common import LoadYaml
from velosetup.velo_constants import ComplianceFramework, DeploymentTier
from velosetup.installer.configs.constants.settings_keys import (
    KEY_SETTING_ARTIFACT_PACKS,
    KEY_SETTING_COMPLIANCE_FRAMEWORK,
    KEY_SETTING_CUSTOM_PASSWORD,
    KEY_SETTING_DEPLOYMENT_TIER,
    KEY_SETTING_GENERATED_PASSWORD,
    KEY_SETTING_PORT,
    KEY_SETTING_PROXY_HOST,
    KEY_SETTING_USE_CUSTOM_PASSWORD,
)
from velosetup.installer.core.settings_store import SettingsStore
from velosetup.installer.utils.exceptions import FileOperationError
from velosetup.installer.utils.settings_file_handler import (
    CONFIG_ITEM_NONE_SENTINEL,
    METADATA_SECTION,
    SETTINGS_SECTION,
    SettingsFileHandler,
)


class TestSettingsFileHandler(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.store = SettingsStore()
        self.store.set_value(KEY_SETTING_DEPLOYMENT_TIER, "Server")
        self.store.set_value(KEY_SETTING_COMPLIANCE_FRAMEWORK, "GDPR")
        self.store.set_value(KEY_SETTING_PORT, 9443)
        self.store.set_value(KEY_SETTING_ARTIFACT_PACKS, ["Essential", "Windows"])
        self.store.set_value(KEY_SETTING_USE_CUSTOM_PASSWORD, True)
        self.store.set_value(KEY_SETTING_CUSTOM_PASSWORD, "hunter2hunter2")

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _path(self, name):
        return os.path.join(self.temp_dir, name)

    def _roundtrip(self, filename, **kwargs):
        SettingsFileHandler(self.store).save_to_file(self._path(filename), **kwargs)
        loaded = SettingsStore()
        SettingsFileHandler(loaded).load_from_file(self._path(filename))
        return loaded

    def test_json_roundtrip(self):
        loaded = self._roundtrip("settings.json")
        self.assertEqual(loaded.get_value(KEY_SETTING_DEPLOYMENT_TIER), DeploymentTier.SERVER)
        self.assertEqual(loaded.get_value(KEY_SETTING_COMPLIANCE_FRAMEWORK), ComplianceFramework.GDPR)
        self.assertEqual(loaded.get_value(KEY_SETTING_PORT), 9443)
        self.assertEqual(loaded.get_value(KEY_SETTING_ARTIFACT_PACKS), ["Essential", "Windows"])

    def test_yaml_roundtrip(self):
        loaded = self._roundtrip("settings.yaml")
        self.assertEqual(loaded.get_value(KEY_SETTING_DEPLOYMENT_TIER), DeploymentTier.SERVER)
        self.assertEqual(loaded.get_value(KEY_SETTING_PORT), 9443)

    def test_passwords_excluded_by_default(self):
        path = self._path("settings.json")
        SettingsFileHandler(self.store).save_to_file(path)
        with open(path) as f:
            data = json.load(f)
        self.assertNotIn(KEY_SETTING_CUSTOM_PASSWORD, data[SETTINGS_SECTION])
        self.assertNotIn(KEY_SETTING_GENERATED_PASSWORD, data[SETTINGS_SECTION])
        self.assertEqual(data[METADATA_SECTION]["generated_by"], "velosetup")

    def test_generated_password_never_exported(self):
        path = self._path("settings.yml")
        SettingsFileHandler(self.store).save_to_file(path, include_passwords=True)
        settings = LoadYaml(path)[SETTINGS_SECTION]
        self.assertEqual(settings[KEY_SETTING_CUSTOM_PASSWORD], "hunter2hunter2")
        self.assertNotIn(KEY_SETTING_GENERATED_PASSWORD, settings)

    def test_blank_values_written_as_sentinel_and_left_at_default(self):
        path = self._path("settings.json")
        SettingsFileHandler(self.store).save_to_file(path)
        with open(path) as f:
            self.assertEqual(json.load(f)[SETTINGS_SECTION][KEY_SETTING_PROXY_HOST], CONFIG_ITEM_NONE_SENTINEL)

        loaded = SettingsStore()
        SettingsFileHandler(loaded).load_from_file(path)
        self.assertEqual(loaded.get_value(KEY_SETTING_PROXY_HOST), "")

    def test_missing_keys_reported(self):
        path = self._path("partial.yaml")
        with open(path, "w") as f:
            f.write("settings:\n  network.port: 9000\n")
        missing = SettingsFileHandler(self.store).load_from_file(path)
        self.assertNotIn(KEY_SETTING_PORT, missing)
        self.assertIn(KEY_SETTING_DEPLOYMENT_TIER, missing)
        self.assertEqual(self.store.get_value(KEY_SETTING_PORT), 9000)

    def test_extension_auto_detection(self):
        path = self._path("settings.conf")
        with open(path, "w") as f:
            json.dump({SETTINGS_SECTION: {KEY_SETTING_PORT: 9555}}, f)
        SettingsFileHandler(self.store).load_from_file(path)
        self.assertEqual(self.store.get_value(KEY_SETTING_PORT), 9555)

    def test_missing_file(self):
        with self.assertRaises(FileOperationError):
            SettingsFileHandler(self.store).load_from_file(self._path("nope.json"))

    def test_malformed_file(self):
        path = self._path("broken.json")
        with open(path, "w") as f:
            f.write("{not json")
        with self.assertRaises(FileOperationError):
            SettingsFileHandler(self.store).load_from_file(path)

    def test_non_mapping_root(self):
        path = self._path("list.yaml")
        with open(path, "w") as f:
            f.write("- a\n- b\n")
        with self.assertRaises(FileOperationError):
            SettingsFileHandler(self.store).load_from_file(path)

    def test_default_export_filename(self):
        handler = SettingsFileHandler(self.store)
        self.assertTrue(handler.generate_default_export_filename().startswith("velosetup-settings_"))
        self.assertTrue(handler.generate_default_export_filename("yaml").endswith(".yaml"))


if __name__ == "__main__":
    unittest.main()
