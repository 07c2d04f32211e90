#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.


"""
Network settings items for the Velociraptor installer.

Only the type of each value is checked here; range and format rules (e.g.,
the GUI port must not be a privileged port) are applied by validate_settings.
"""

from velosetup.velo_constants import (
    DEFAULT_BIND_ADDRESS,
    DEFAULT_DNS_NAME,
    DEFAULT_GUI_PORT,
    DEFAULT_PROXY_PORT,
)

from velosetup.installer.core.config_item import ConfigItem
from velosetup.installer.configs.constants.settings_keys import (
    KEY_SETTING_BIND_ADDRESS,
    KEY_SETTING_DNS_NAME,
    KEY_SETTING_PORT,
    KEY_SETTING_PROXY_ENABLED,
    KEY_SETTING_PROXY_HOST,
    KEY_SETTING_PROXY_PORT,
)


def _is_int(x) -> bool:
    return isinstance(x, int) and not isinstance(x, bool)


CONFIG_ITEM_BIND_ADDRESS = ConfigItem(
    key=KEY_SETTING_BIND_ADDRESS,
    label="Bind Address",
    default_value=DEFAULT_BIND_ADDRESS,
    validator=lambda x: isinstance(x, str),
    question="IP address the GUI listens on",
)

CONFIG_ITEM_PORT = ConfigItem(
    key=KEY_SETTING_PORT,
    label="GUI Port",
    default_value=DEFAULT_GUI_PORT,
    validator=lambda x: (True, "") if _is_int(x) else (False, "Port must be an integer"),
    question="TCP port the GUI listens on",
)

CONFIG_ITEM_DNS_NAME = ConfigItem(
    key=KEY_SETTING_DNS_NAME,
    label="DNS Name",
    default_value=DEFAULT_DNS_NAME,
    validator=lambda x: isinstance(x, str),
    question="Public DNS name of the server",
)

CONFIG_ITEM_PROXY_ENABLED = ConfigItem(
    key=KEY_SETTING_PROXY_ENABLED,
    label="Use Outbound Proxy",
    default_value=False,
    validator=lambda x: isinstance(x, bool),
    question="Route outbound server connections through an HTTP proxy",
)

CONFIG_ITEM_PROXY_HOST = ConfigItem(
    key=KEY_SETTING_PROXY_HOST,
    label="Proxy Host",
    default_value="",
    validator=lambda x: isinstance(x, str),
    accept_blank=True,
    question="Proxy host name or IP address",
)

CONFIG_ITEM_PROXY_PORT = ConfigItem(
    key=KEY_SETTING_PROXY_PORT,
    label="Proxy Port",
    default_value=DEFAULT_PROXY_PORT,
    validator=lambda x: (True, "") if _is_int(x) else (False, "Port must be an integer"),
    question="Proxy TCP port",
)


def get_network_settings_item_dict():
    """Get all ConfigItem objects from this module."""
    return {value.key: value for value in globals().values() if isinstance(value, ConfigItem)}


ALL_NETWORK_SETTINGS_ITEMS_DICT = get_network_settings_item_dict()
