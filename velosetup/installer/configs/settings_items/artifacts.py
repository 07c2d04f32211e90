#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

from velosetup.installer.core.config_item import ConfigItem, ListOfStringsConfigItem
from velosetup.installer.configs.artifact_packs import ARTIFACT_PACK_ESSENTIAL, KNOWN_ARTIFACT_PACKS
from velosetup.installer.configs.constants.settings_keys import KEY_SETTING_ARTIFACT_PACKS

CONFIG_ITEM_ARTIFACT_PACKS = ListOfStringsConfigItem(
    key=KEY_SETTING_ARTIFACT_PACKS,
    label="Artifact Packs",
    default_value=[ARTIFACT_PACK_ESSENTIAL],
    validator=lambda x: (
        (True, "")
        if isinstance(x, list) and all(isinstance(p, str) for p in x)
        else (False, "Must be a list of pack names")
    ),
    choices=list(KNOWN_ARTIFACT_PACKS),
    question="Artifact packs to enable (comma-separated)",
)


def get_artifact_settings_item_dict():
    """Get all ConfigItem objects from this module."""
    return {value.key: value for value in globals().values() if isinstance(value, ConfigItem)}


ALL_ARTIFACT_SETTINGS_ITEMS_DICT = get_artifact_settings_item_dict()
