#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Unit tests for cross-field settings validation."""

import os
import shutil
import tempfile
import unittest

from velosetup.installer.configs.constants.settings_keys import (
    KEY_SETTING_ACME_EMAIL,
    KEY_SETTING_ADMIN_USERNAME,
    KEY_SETTING_ARTIFACT_PACKS,
    KEY_SETTING_BIND_ADDRESS,
    KEY_SETTING_CERTIFICATE_STRATEGY,
    KEY_SETTING_CUSTOM_CERT_PATH,
    KEY_SETTING_CUSTOM_KEY_PATH,
    KEY_SETTING_CUSTOM_PASSWORD,
    KEY_SETTING_PORT,
    KEY_SETTING_PROXY_ENABLED,
    KEY_SETTING_PROXY_HOST,
    KEY_SETTING_SSO_CLIENT_ID,
    KEY_SETTING_SSO_CLIENT_SECRET,
    KEY_SETTING_SSO_ENDPOINT,
    KEY_SETTING_SSO_PROVIDER,
    KEY_SETTING_USE_CUSTOM_PASSWORD,
)
from velosetup.installer.core.settings_store import SettingsStore
from velosetup.installer.core.validation import (
    CUSTOM_PASSWORD_REQUIRED_MESSAGE,
    format_validation_summary,
    PORT_RANGE_MESSAGE,
    validate_settings,
)


def _keys(issues):
    return [issue.key for issue in issues]


class TestValidationRequired(unittest.TestCase):
    def setUp(self):
        self.store = SettingsStore()

    def test_defaults_are_valid(self):
        self.assertEqual(validate_settings(self.store), [])

    def test_privileged_port_reports_single_issue(self):
        self.store.set_value(KEY_SETTING_PORT, 80)
        issues = validate_settings(self.store)
        self.assertEqual(len(issues), 1)
        self.assertEqual(issues[0].key, KEY_SETTING_PORT)
        self.assertEqual(issues[0].message, PORT_RANGE_MESSAGE)

    def test_port_bounds(self):
        for port, ok in ((1023, False), (1024, True), (65535, True), (65536, False)):
            self.store.set_value(KEY_SETTING_PORT, port)
            self.assertEqual(validate_settings(self.store) == [], ok, port)

    def test_all_violations_reported_together(self):
        self.store.set_value(KEY_SETTING_PORT, 80)
        self.store.set_value(KEY_SETTING_BIND_ADDRESS, "999.1.1.1")
        self.store.set_value(KEY_SETTING_ADMIN_USERNAME, "   ")
        issues = validate_settings(self.store)
        self.assertEqual(
            _keys(issues),
            [KEY_SETTING_PORT, KEY_SETTING_BIND_ADDRESS, KEY_SETTING_ADMIN_USERNAME],
        )

    def test_ipv6_bind_address_accepted(self):
        self.store.set_value(KEY_SETTING_BIND_ADDRESS, "::1")
        self.assertEqual(validate_settings(self.store), [])

    def test_custom_password_required_when_enabled(self):
        self.store.set_value(KEY_SETTING_USE_CUSTOM_PASSWORD, True)
        issues = validate_settings(self.store)
        self.assertEqual(len(issues), 1)
        self.assertEqual(issues[0].message, CUSTOM_PASSWORD_REQUIRED_MESSAGE)

    def test_custom_password_minimum_length(self):
        self.store.set_value(KEY_SETTING_USE_CUSTOM_PASSWORD, True)
        self.store.set_value(KEY_SETTING_CUSTOM_PASSWORD, "short")
        self.assertEqual(_keys(validate_settings(self.store)), [KEY_SETTING_CUSTOM_PASSWORD])
        self.store.set_value(KEY_SETTING_CUSTOM_PASSWORD, "long enough")
        self.assertEqual(validate_settings(self.store), [])

    def test_custom_password_ignored_when_disabled(self):
        self.store.set_value(KEY_SETTING_CUSTOM_PASSWORD, "x")
        self.assertEqual(validate_settings(self.store), [])


class TestValidationCertificates(unittest.TestCase):
    def setUp(self):
        self.store = SettingsStore()
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_acme_requires_email(self):
        self.store.set_value(KEY_SETTING_CERTIFICATE_STRATEGY, "ManagedACME")
        self.assertEqual(_keys(validate_settings(self.store)), [KEY_SETTING_ACME_EMAIL])
        self.store.set_value(KEY_SETTING_ACME_EMAIL, "ops@example.com")
        self.assertEqual(validate_settings(self.store), [])

    def test_custom_import_requires_existing_files(self):
        self.store.set_value(KEY_SETTING_CERTIFICATE_STRATEGY, "CustomImport")
        self.assertEqual(
            _keys(validate_settings(self.store)),
            [KEY_SETTING_CUSTOM_CERT_PATH, KEY_SETTING_CUSTOM_KEY_PATH],
        )

        cert = os.path.join(self.temp_dir, "server.pem")
        with open(cert, "w") as f:
            f.write("cert")
        self.store.set_value(KEY_SETTING_CUSTOM_CERT_PATH, cert)
        self.store.set_value(KEY_SETTING_CUSTOM_KEY_PATH, os.path.join(self.temp_dir, "missing.key"))

        issues = validate_settings(self.store)
        self.assertEqual(_keys(issues), [KEY_SETTING_CUSTOM_KEY_PATH])
        self.assertIn("does not exist", issues[0].message)


class TestValidationOptionalFeatures(unittest.TestCase):
    def setUp(self):
        self.store = SettingsStore()

    def test_proxy_requires_host(self):
        self.store.set_value(KEY_SETTING_PROXY_ENABLED, True)
        self.assertEqual(_keys(validate_settings(self.store)), [KEY_SETTING_PROXY_HOST])

    def test_saml_requires_url(self):
        self.store.set_value(KEY_SETTING_SSO_PROVIDER, "SAML")
        self.store.set_value(KEY_SETTING_SSO_ENDPOINT, "idp.example.com")
        self.assertEqual(_keys(validate_settings(self.store)), [KEY_SETTING_SSO_ENDPOINT])
        self.store.set_value(KEY_SETTING_SSO_ENDPOINT, "https://idp.example.com/metadata")
        self.assertEqual(validate_settings(self.store), [])

    def test_oauth_requires_client_fields(self):
        self.store.set_value(KEY_SETTING_SSO_PROVIDER, "OAuth")
        self.assertEqual(
            _keys(validate_settings(self.store)),
            [KEY_SETTING_SSO_CLIENT_ID, KEY_SETTING_SSO_CLIENT_SECRET],
        )

    def test_unknown_artifact_pack(self):
        self.store.set_value(KEY_SETTING_ARTIFACT_PACKS, ["Essential", "Quantum"])
        issues = validate_settings(self.store)
        self.assertEqual(_keys(issues), [KEY_SETTING_ARTIFACT_PACKS])
        self.assertIn("Quantum", issues[0].message)


class TestValidationSummary(unittest.TestCase):
    def test_empty(self):
        self.assertEqual(format_validation_summary([]), "")

    def test_uses_labels(self):
        store = SettingsStore()
        store.set_value(KEY_SETTING_PORT, 80)
        summary = format_validation_summary(validate_settings(store))
        self.assertIn("- GUI Port: " + PORT_RANGE_MESSAGE, summary)


if __name__ == "__main__":
    unittest.main()
