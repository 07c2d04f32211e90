#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.


"""
Deployment settings items for the Velociraptor installer.

This module contains the settings items that decide what kind of server is
installed and where it lives on disk.
"""

from velosetup.velo_common import get_default_install_dir
from velosetup.velo_constants import DeploymentTier

from velosetup.installer.core.config_item import ConfigItem
from velosetup.installer.configs.constants.settings_keys import (
    KEY_SETTING_DATASTORE_DIR,
    KEY_SETTING_DEPLOYMENT_TIER,
    KEY_SETTING_INSTALL_AS_SERVICE,
    KEY_SETTING_INSTALL_DIR,
)

CONFIG_ITEM_DEPLOYMENT_TIER = ConfigItem(
    key=KEY_SETTING_DEPLOYMENT_TIER,
    label="Deployment Tier",
    default_value=DeploymentTier.STANDALONE,
    validator=lambda x: (
        (True, "") if isinstance(x, DeploymentTier) else (False, f"Must be one of {[t.value for t in DeploymentTier]}")
    ),
    choices=[x.value for x in DeploymentTier],
    question="Select the deployment tier (Standalone, Server or Enterprise)",
)

CONFIG_ITEM_INSTALL_AS_SERVICE = ConfigItem(
    key=KEY_SETTING_INSTALL_AS_SERVICE,
    label="Install as Service",
    default_value=False,
    validator=lambda x: isinstance(x, bool),
    question="Register Velociraptor with the system service manager",
)

CONFIG_ITEM_INSTALL_DIR = ConfigItem(
    key=KEY_SETTING_INSTALL_DIR,
    label="Install Directory",
    default_value=get_default_install_dir(),
    validator=lambda x: (True, "") if isinstance(x, str) and x.strip() else (False, "A directory is required"),
    question="Directory to install Velociraptor into",
)

CONFIG_ITEM_DATASTORE_DIR = ConfigItem(
    key=KEY_SETTING_DATASTORE_DIR,
    label="Datastore Directory",
    default_value="",
    validator=lambda x: isinstance(x, str),
    accept_blank=True,
    question="Datastore directory (blank for <install directory>/datastore)",
)


def get_deployment_settings_item_dict():
    """Get all ConfigItem objects from this module.

    Returns:
        Dict mapping settings key strings to their ConfigItem objects
    """
    return {value.key: value for value in globals().values() if isinstance(value, ConfigItem)}


ALL_DEPLOYMENT_SETTINGS_ITEMS_DICT = get_deployment_settings_item_dict()
