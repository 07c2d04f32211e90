#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.


"""
Authentication settings items (single sign-on and the initial administrator).
"""

from velosetup.velo_constants import DEFAULT_ADMIN_USERNAME, SSOProvider

from velosetup.installer.core.config_item import ConfigItem
from velosetup.installer.configs.constants.settings_keys import (
    KEY_SETTING_ADMIN_USERNAME,
    KEY_SETTING_CUSTOM_PASSWORD,
    KEY_SETTING_GENERATED_PASSWORD,
    KEY_SETTING_SSO_CLIENT_ID,
    KEY_SETTING_SSO_CLIENT_SECRET,
    KEY_SETTING_SSO_DOMAIN,
    KEY_SETTING_SSO_ENDPOINT,
    KEY_SETTING_SSO_PROVIDER,
    KEY_SETTING_USE_CUSTOM_PASSWORD,
)

CONFIG_ITEM_SSO_PROVIDER = ConfigItem(
    key=KEY_SETTING_SSO_PROVIDER,
    label="Single Sign-On Provider",
    default_value=SSOProvider.NONE,
    validator=lambda x: (
        (True, "") if isinstance(x, SSOProvider) else (False, f"Must be one of {[p.value for p in SSOProvider]}")
    ),
    choices=[x.value for x in SSOProvider],
    question="Select a single sign-on provider for the GUI",
)

CONFIG_ITEM_SSO_ENDPOINT = ConfigItem(
    key=KEY_SETTING_SSO_ENDPOINT,
    label="SAML Endpoint",
    default_value="",
    validator=lambda x: isinstance(x, str),
    accept_blank=True,
    question="SAML identity provider URL",
)

CONFIG_ITEM_SSO_CLIENT_ID = ConfigItem(
    key=KEY_SETTING_SSO_CLIENT_ID,
    label="OAuth Client ID",
    default_value="",
    validator=lambda x: isinstance(x, str),
    accept_blank=True,
    question="OAuth client ID",
)

CONFIG_ITEM_SSO_CLIENT_SECRET = ConfigItem(
    key=KEY_SETTING_SSO_CLIENT_SECRET,
    label="OAuth Client Secret",
    default_value="",
    validator=lambda x: isinstance(x, str),
    accept_blank=True,
    is_password=True,
    question="OAuth client secret",
)

CONFIG_ITEM_SSO_DOMAIN = ConfigItem(
    key=KEY_SETTING_SSO_DOMAIN,
    label="Active Directory Domain",
    default_value="",
    validator=lambda x: isinstance(x, str),
    accept_blank=True,
    question="Active Directory domain",
)

CONFIG_ITEM_ADMIN_USERNAME = ConfigItem(
    key=KEY_SETTING_ADMIN_USERNAME,
    label="Administrator Username",
    default_value=DEFAULT_ADMIN_USERNAME,
    validator=lambda x: isinstance(x, str),
    question="Name of the initial administrator account",
)

CONFIG_ITEM_USE_CUSTOM_PASSWORD = ConfigItem(
    key=KEY_SETTING_USE_CUSTOM_PASSWORD,
    label="Use Custom Password",
    default_value=False,
    validator=lambda x: isinstance(x, bool),
    question="Provide your own administrator password instead of a generated one",
)

CONFIG_ITEM_CUSTOM_PASSWORD = ConfigItem(
    key=KEY_SETTING_CUSTOM_PASSWORD,
    label="Administrator Password",
    default_value="",
    validator=lambda x: isinstance(x, str),
    accept_blank=True,
    is_password=True,
    question="Administrator password",
)

# filled with a random value by each SettingsStore
CONFIG_ITEM_GENERATED_PASSWORD = ConfigItem(
    key=KEY_SETTING_GENERATED_PASSWORD,
    label="Generated Password",
    default_value="",
    validator=lambda x: isinstance(x, str),
    is_password=True,
)


def get_auth_settings_item_dict():
    """Get all ConfigItem objects from this module."""
    return {value.key: value for value in globals().values() if isinstance(value, ConfigItem)}


ALL_AUTH_SETTINGS_ITEMS_DICT = get_auth_settings_item_dict()
