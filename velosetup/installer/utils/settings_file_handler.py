#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Read and write installer settings files (JSON/YAML) for a SettingsStore."""

import datetime
import json

from enum import Enum
from pathlib import Path
from typing import Any, Dict, List

from ruamel.yaml import YAML

from velosetup.velo_constants import SettingsFileFormat, VELOSETUP_VERSION
from velosetup.installer.configs.constants.settings_keys import KEY_SETTING_GENERATED_PASSWORD
from velosetup.installer.core.settings_store import SettingsStore
from velosetup.installer.utils.exceptions import FileOperationError
from velosetup.installer.utils.logger_utils import InstallerLogger

SETTINGS_SECTION = "settings"
METADATA_SECTION = "metadata"

# Sentinel value for None/empty values that maintains format consistency
CONFIG_ITEM_NONE_SENTINEL = "<VELOSETUP_NONE>"


class SettingsFileHandler:
    """Handler for loading and saving installer settings files.

    A settings file has two top-level sections: ``settings`` (a flat mapping
    of setting key to value) and ``metadata`` (who wrote it and when).
    """

    def __init__(self, store: SettingsStore):
        self.store = store

    def load_from_file(self, settings_file_path: str) -> List[str]:
        """Load settings from a JSON/YAML settings file into the store.

        Args:
            settings_file_path: Path to the settings file (JSON or YAML)

        Returns:
            List of setting keys that were missing from the file and left at their defaults

        Raises:
            FileOperationError: If file cannot be read or parsed
        """
        settings_path = Path(settings_file_path)
        if not settings_path.exists():
            raise FileOperationError(f"Settings file not found: {settings_file_path}")

        settings_data = self._parse_settings_file(settings_path)
        if not isinstance(settings_data, dict):
            raise FileOperationError(f"Settings file {settings_file_path} must contain a mapping at root level")

        section = settings_data.get(SETTINGS_SECTION, {})
        if not isinstance(section, dict):
            raise FileOperationError(f"'{SETTINGS_SECTION}' in {settings_file_path} must be a mapping")

        # sentinels mean "leave at default"
        section = {key: value for key, value in section.items() if value != CONFIG_ITEM_NONE_SENTINEL}
        missing = self.store.load_from_dict(section)
        for key in missing:
            InstallerLogger.debug(f"Setting {key} not found in settings file, using default: {self.store.get_value(key)}")
        return missing

    def save_to_file(
        self,
        settings_file_path: str,
        file_format: str = "auto",
        include_passwords: bool = False,
    ) -> None:
        """Save the store's current settings to a JSON/YAML settings file.

        Args:
            settings_file_path: Path where to save the settings file
            file_format: 'json', 'yaml', or 'auto' to detect from the extension
            include_passwords: Whether to write password values (never the generated one)

        Raises:
            FileOperationError: If file cannot be written
        """
        settings_path = Path(settings_file_path)

        if file_format == "auto":
            if settings_path.suffix.lower() in [".yml", ".yaml"]:
                file_format = SettingsFileFormat.YAML.value
            else:
                file_format = SettingsFileFormat.JSON.value

        settings_data = self._build_settings_data(include_passwords)

        try:
            settings_path.parent.mkdir(parents=True, exist_ok=True)
            if file_format == SettingsFileFormat.YAML.value:
                yaml = YAML()
                yaml.default_flow_style = False
                yaml.width = 4096
                with open(settings_path, "w") as f:
                    yaml.dump(settings_data, f)
            else:
                with open(settings_path, "w") as f:
                    json.dump(settings_data, f, indent=2, sort_keys=True)
            InstallerLogger.debug(f"Settings saved to {settings_file_path}")
        except (OSError, TypeError, ValueError) as e:
            raise FileOperationError(f"Failed to write settings file {settings_file_path}: {e}") from e

    def generate_default_export_filename(self, file_format: str = "json") -> str:
        timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
        extension = "yaml" if file_format == SettingsFileFormat.YAML.value else "json"
        return f"velosetup-settings_{timestamp}.{extension}"

    def _parse_settings_file(self, settings_path: Path) -> Dict[str, Any]:
        try:
            if settings_path.suffix.lower() in [".yml", ".yaml"]:
                yaml = YAML(typ="safe", pure=True)
                with open(settings_path, "r") as f:
                    return yaml.load(f) or {}
            elif settings_path.suffix.lower() == ".json":
                with open(settings_path, "r") as f:
                    return json.load(f)
            else:
                # try to auto-detect by parsing content
                with open(settings_path, "r") as f:
                    content = f.read().strip()
                if content.startswith("{"):
                    return json.loads(content)
                yaml = YAML(typ="safe", pure=True)
                return yaml.load(content) or {}
        except Exception as e:
            raise FileOperationError(f"Failed to parse settings file {settings_path}: {e}") from e

    def _build_settings_data(self, include_passwords: bool) -> Dict[str, Any]:
        settings_data = {
            SETTINGS_SECTION: {},
            METADATA_SECTION: {
                "generated_by": "velosetup",
                "timestamp": datetime.datetime.now().isoformat(),
                "version": VELOSETUP_VERSION,
            },
        }

        for key, item in self.store.get_all_items().items():
            if item.is_password and (not include_passwords or key == KEY_SETTING_GENERATED_PASSWORD):
                continue

            value = item.get_value()
            if value is None or (isinstance(value, str) and value == ""):
                value = CONFIG_ITEM_NONE_SENTINEL

            settings_data[SETTINGS_SECTION][key] = self._serialize_value(value)

        return settings_data

    def _serialize_value(self, value: Any) -> Any:
        if isinstance(value, Enum):
            return value.value
        if isinstance(value, tuple):
            return list(value)
        return value
