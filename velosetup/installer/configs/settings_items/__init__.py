#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""
Settings Items for the Velociraptor installer
=============================================

This package contains all of the definitions for individual settings items (ConfigItem).

All settings item management is handled by the SettingsStore class.
Individual items are exposed here for initialization purposes,
but their state should be managed through a SettingsStore instance.
"""

from .artifacts import ALL_ARTIFACT_SETTINGS_ITEMS_DICT
from .auth import ALL_AUTH_SETTINGS_ITEMS_DICT
from .deployment import ALL_DEPLOYMENT_SETTINGS_ITEMS_DICT
from .network import ALL_NETWORK_SETTINGS_ITEMS_DICT
from .security import ALL_SECURITY_SETTINGS_ITEMS_DICT

# Combine all settings item dictionaries into a single dictionary (order is display order)
ALL_SETTINGS_ITEMS_DICT = {
    **ALL_DEPLOYMENT_SETTINGS_ITEMS_DICT,
    **ALL_SECURITY_SETTINGS_ITEMS_DICT,
    **ALL_NETWORK_SETTINGS_ITEMS_DICT,
    **ALL_AUTH_SETTINGS_ITEMS_DICT,
    **ALL_ARTIFACT_SETTINGS_ITEMS_DICT,
}

__all__ = ["ALL_SETTINGS_ITEMS_DICT"]
