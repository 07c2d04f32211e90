#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Unit tests for line-oriented edits of the server configuration."""

import os
import shutil
import stat
import tempfile
import unittest

from velosetup.installer.actions.config_patcher import (
    build_section_edits,
    ConfigFilePatcher,
    connections_per_second,
    find_sections,
    patch_text,
    render_scalar,
    Replace,
    SectionEdit,
    TopLevelEdit,
)
from velosetup.installer.configs.constants.settings_keys import (
    KEY_SETTING_ACME_EMAIL,
    KEY_SETTING_CERTIFICATE_STRATEGY,
    KEY_SETTING_DNS_NAME,
    KEY_SETTING_INSTALL_DIR,
    KEY_SETTING_SSO_CLIENT_ID,
    KEY_SETTING_SSO_CLIENT_SECRET,
    KEY_SETTING_SSO_PROVIDER,
)
from velosetup.installer.core.derivation import derive
from velosetup.installer.core.settings_store import SettingsStore
from velosetup.installer.utils.exceptions import ConfigPatchError

BASE = """# generated
GUI:
  bind_address: 127.0.0.1
  bind_port: 8889
  gw_certificate: |
    -----BEGIN CERTIFICATE-----
    MIIB
    -----END CERTIFICATE-----
  authenticator:
    type: Basic
    sub_authenticators:
    - type: Google

  public_url: https://localhost:8889/
Frontend:
  hostname: localhost
  resources:
    expected_clients: 10000
    connections_per_second: 100
autocert_domain: old.example.com
"""


class TestRenderScalar(unittest.TestCase):
    def test_plain_values(self):
        self.assertEqual(render_scalar("localhost"), "localhost")
        self.assertEqual(render_scalar("/opt/velociraptor/datastore"), "/opt/velociraptor/datastore")
        self.assertEqual(render_scalar("https://idp.example.com/x"), "https://idp.example.com/x")
        self.assertEqual(render_scalar(8889), "8889")
        self.assertEqual(render_scalar(True), "true")
        self.assertEqual(render_scalar(None), "null")

    def test_ambiguous_strings_quoted(self):
        self.assertEqual(render_scalar("true"), '"true"')
        self.assertEqual(render_scalar("8889"), '"8889"')
        self.assertEqual(render_scalar("two words"), '"two words"')
        self.assertEqual(render_scalar(""), '""')


class TestPatchText(unittest.TestCase):
    def test_replaces_value_in_place(self):
        patched = patch_text(BASE, [SectionEdit("GUI", {"bind_port": 9443})])
        self.assertEqual(patched, BASE.replace("bind_port: 8889", "bind_port: 9443"))

    def test_everything_else_preserved(self):
        patched = patch_text(BASE, [SectionEdit("GUI", {"bind_address": "0.0.0.0"})])
        self.assertIn("# generated\n", patched)
        self.assertIn("    -----BEGIN CERTIFICATE-----\n    MIIB\n", patched)
        self.assertIn("    - type: Google\n\n  public_url:", patched)
        self.assertTrue(patched.endswith("autocert_domain: old.example.com\n"))

    def test_missing_key_appended_to_section(self):
        patched = patch_text(BASE, [SectionEdit("Frontend", {"proxy": "http://proxy:3128"})])
        self.assertIn(
            "    connections_per_second: 100\n  proxy: http://proxy:3128\nautocert_domain:",
            patched,
        )

    def test_missing_section_appended_at_end(self):
        patched = patch_text(BASE + "\n\n", [SectionEdit("Logging", {"max_age": 86400})])
        self.assertTrue(patched.endswith("autocert_domain: old.example.com\nLogging:\n  max_age: 86400\n"))

    def test_nested_mapping_merged(self):
        patched = patch_text(BASE, [SectionEdit("Frontend", {"resources": {"connections_per_second": 5}})])
        self.assertIn("    expected_clients: 10000\n    connections_per_second: 5\n", patched)

    def test_replace_swaps_whole_block(self):
        patched = patch_text(BASE, [SectionEdit("GUI", {"authenticator": Replace({"type": "OIDC"})})])
        self.assertIn("  authenticator:\n    type: OIDC\n\n  public_url:", patched)
        self.assertNotIn("Google", patched)

    def test_top_level_edits(self):
        patched = patch_text(
            BASE,
            [TopLevelEdit("autocert_domain", "new.example.com"), TopLevelEdit("autocert_cert_cache", "/opt/acme")],
        )
        self.assertIn("autocert_domain: new.example.com\n", patched)
        self.assertNotIn("old.example.com", patched)
        self.assertTrue(patched.endswith("autocert_cert_cache: /opt/acme\n"))

    def test_inline_empty_section_expanded(self):
        patched = patch_text("GUI: {}\nDatastore:\n  location: /x\n", [SectionEdit("GUI", {"bind_port": 9000})])
        self.assertEqual(patched, "GUI:\n  bind_port: 9000\nDatastore:\n  location: /x\n")

    def test_follows_existing_indentation(self):
        patched = patch_text("GUI:\n    bind_port: 1\n", [SectionEdit("GUI", {"bind_address": "::"})])
        self.assertEqual(patched, 'GUI:\n    bind_port: 1\n    bind_address: "::"\n')

    def test_list_values_rendered(self):
        patched = patch_text("GUI:\n  a: 1\n", [SectionEdit("GUI", {"names": ["alpha", "beta"], "empty": []})])
        self.assertIn("  names:\n  - alpha\n  - beta\n  empty: []\n", patched)

    def test_list_keywords_quoted(self):
        # "y" and "no" would load back as booleans
        patched = patch_text("GUI:\n  a: 1\n", [SectionEdit("GUI", {"names": ["y", "no", "x"]})])
        self.assertIn('  names:\n  - "y"\n  - "no"\n  - x\n', patched)

    def test_idempotent(self):
        edits = [
            SectionEdit("GUI", {"bind_port": 9443, "authenticator": Replace({"type": "SAML", "x": 1})}),
            SectionEdit("Frontend", {"resources": {"connections_per_second": 5}, "proxy": "http://p:1"}),
            SectionEdit("Logging", {"max_age": 1}),
            TopLevelEdit("autocert_cert_cache", "/opt/acme"),
        ]
        once = patch_text(BASE, edits)
        self.assertEqual(patch_text(once, edits), once)

    def test_crlf_line_endings_kept(self):
        patched = patch_text("GUI:\r\n  bind_port: 1\r\nLogging: {}\r\n", [SectionEdit("GUI", {"bind_port": 2})])
        self.assertEqual(patched, "GUI:\r\n  bind_port: 2\r\nLogging: {}\r\n")

    def test_missing_final_newline_not_added(self):
        patched = patch_text("GUI:\n  bind_port: 1", [SectionEdit("GUI", {"bind_port": 2})])
        self.assertEqual(patched, "GUI:\n  bind_port: 2")

    def test_empty_text_rejected(self):
        with self.assertRaises(ConfigPatchError):
            patch_text("  \n", [SectionEdit("GUI", {"bind_port": 1})])

    def test_find_sections(self):
        self.assertEqual(find_sections(BASE), ["GUI", "Frontend", "autocert_domain"])


class TestSectionEditsFromSettings(unittest.TestCase):
    def setUp(self):
        self.store = SettingsStore()
        self.store.set_value(KEY_SETTING_INSTALL_DIR, "/opt/velociraptor")

    def _edits_by_section(self, effective):
        return {getattr(e, "section", getattr(e, "key", None)): e for e in build_section_edits(effective)}

    def test_connections_per_second(self):
        self.assertEqual(connections_per_second(50), 10)
        self.assertEqual(connections_per_second(1000), 100)
        self.assertEqual(connections_per_second(10000), 1000)

    def test_mandatory_sections(self):
        edits = self._edits_by_section(derive(self.store))
        for section in ("GUI", "Frontend", "Datastore", "Logging"):
            self.assertIn(section, edits)
        self.assertNotIn("autocert_domain", edits)
        self.assertEqual(edits["GUI"].values["authenticator"].value["type"], "Basic")
        self.assertEqual(edits["Logging"].values["max_age"], 30 * 86400)

    def test_acme_adds_autocert(self):
        self.store.set_value(KEY_SETTING_CERTIFICATE_STRATEGY, "ManagedACME")
        self.store.set_value(KEY_SETTING_ACME_EMAIL, "ops@example.com")
        self.store.set_value(KEY_SETTING_DNS_NAME, "dfir.example.com")
        edits = self._edits_by_section(derive(self.store))
        self.assertEqual(edits["autocert_domain"].value, "dfir.example.com")

    def test_oauth_authenticator(self):
        self.store.set_value(KEY_SETTING_SSO_PROVIDER, "OAuth")
        self.store.set_value(KEY_SETTING_SSO_CLIENT_ID, "client")
        self.store.set_value(KEY_SETTING_SSO_CLIENT_SECRET, "secret")
        authenticator = self._edits_by_section(derive(self.store))["GUI"].values["authenticator"].value
        self.assertEqual(authenticator["type"], "OIDC")
        self.assertEqual(authenticator["oauth_client_id"], "client")


class TestConfigFilePatcher(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.path = os.path.join(self.temp_dir, "server.config.yaml")
        with open(self.path, "w") as f:
            f.write(BASE)
        os.chmod(self.path, stat.S_IRUSR | stat.S_IWUSR)

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_apply_reports_changes(self):
        patcher = ConfigFilePatcher(self.path)
        edits = [SectionEdit("GUI", {"bind_port": 9443})]
        self.assertTrue(patcher.apply(edits))
        self.assertFalse(patcher.apply(edits))
        self.assertIn("bind_port: 9443", patcher.read())

    def test_mode_preserved(self):
        ConfigFilePatcher(self.path).apply([SectionEdit("GUI", {"bind_port": 9443})])
        self.assertEqual(stat.S_IMODE(os.stat(self.path).st_mode), 0o600)
        self.assertEqual(os.listdir(self.temp_dir), ["server.config.yaml"])

    def test_crlf_file_unchanged_when_up_to_date(self):
        with open(self.path, "wb") as f:
            f.write(b"GUI:\r\n  bind_port: 9443\r\n")
        patcher = ConfigFilePatcher(self.path)

        self.assertFalse(patcher.apply([SectionEdit("GUI", {"bind_port": 9443})]))
        self.assertTrue(patcher.apply([SectionEdit("GUI", {"bind_port": 9444})]))
        with open(self.path, "rb") as f:
            self.assertEqual(f.read(), b"GUI:\r\n  bind_port: 9444\r\n")

    def test_missing_mandatory_section_created(self):
        self.assertTrue(ConfigFilePatcher(self.path).apply([SectionEdit("Datastore", {"location": "/data"})]))
        self.assertIn("Datastore", find_sections(ConfigFilePatcher(self.path).read()))

    def test_patch_from_settings_is_idempotent(self):
        store = SettingsStore()
        store.set_value(KEY_SETTING_INSTALL_DIR, self.temp_dir)
        effective = derive(store)
        patcher = ConfigFilePatcher(self.path)

        self.assertTrue(patcher.patch(effective))
        self.assertFalse(patcher.patch(effective))
        text = patcher.read()
        self.assertEqual(find_sections(text)[:2], ["GUI", "Frontend"])
        self.assertIn("    connections_per_second: 10\n", text)
        self.assertIn("-----BEGIN CERTIFICATE-----", text)

    def test_missing_file(self):
        with self.assertRaises(ConfigPatchError):
            ConfigFilePatcher(os.path.join(self.temp_dir, "nope.yaml")).apply([SectionEdit("GUI", {"a": 1})])


if __name__ == "__main__":
    unittest.main()
