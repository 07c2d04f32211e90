#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Settings store for Velociraptor installer settings."""

import copy

from typing import Any, Callable, Dict, List, Optional

from velosetup.velo_constants import (
    CertificateStrategy,
    GENERATED_PASSWORD_LENGTH,
    SSOProvider,
)
from velosetup.velo_utils import random_password

from velosetup.installer.configs.constants.settings_keys import *
from velosetup.installer.configs.settings_items import ALL_SETTINGS_ITEMS_DICT
from velosetup.installer.core.config_item import ConfigItem
from velosetup.installer.core.observable import ObservableStoreMixin
from velosetup.installer.core.settings_models import (
    ActiveDirectorySSO,
    CertificateSettings,
    Credentials,
    CustomImportCertificate,
    ManagedAcmeCertificate,
    NetworkSettings,
    NoSSO,
    OAuthSSO,
    ProxySettings,
    SamlSSO,
    SelfSignedCertificate,
    SSOSettings,
)
from velosetup.installer.core.transform_registry import apply_inbound, apply_outbound
from velosetup.installer.utils.exceptions import (
    ConfigItemNotFoundError,
    ConfigValueValidationError,
)
from velosetup.installer.utils.logger_utils import InstallerLogger


class SettingsStore(ObservableStoreMixin):
    """Keyed settings items owned by a controller; every change goes through set_value."""

    def __init__(self):
        self._items: Dict[str, ConfigItem] = copy.deepcopy(ALL_SETTINGS_ITEMS_DICT)
        self._observers: Dict[str, List[Callable[..., None]]] = {}
        self._modified_keys: List[str] = []  # list instead of a set to preserve change order for display
        self._generate_password()

    def _generate_password(self):
        # generated once per store and not counted as a user modification
        item = self._items[KEY_SETTING_GENERATED_PASSWORD]
        item.value = random_password(GENERATED_PASSWORD_LENGTH)

    def get_item(self, key: str) -> Optional[ConfigItem]:
        """Get a ConfigItem instance by its key.

        Args:
            key: Settings item key

        Returns:
            ConfigItem instance or None if not found
        """
        return self._items.get(key)

    def get_value(self, key: str) -> Optional[Any]:
        """Get the current value of a settings item (None for unknown keys)."""
        item = self.get_item(key)
        return item.get_value() if item else None

    def all_keys(self) -> List[str]:
        """Get a list of all settings item keys."""
        return list(self._items.keys())

    def get_all_items(self, modified_only: bool = False) -> Dict[str, ConfigItem]:
        """Get copies of all settings items (or only those modified, in modification order)."""
        if (result := copy.deepcopy(self._items)) and modified_only:
            result = {key: result[key] for key in self._modified_keys if key in result}
        return result

    def get_modified_keys(self) -> List[str]:
        return list(self._modified_keys)

    def set_value(
        self,
        key: str,
        value: Any,
        ignore_errors: Optional[bool] = False,
    ) -> None:
        """Set the value of a settings item.

        Args:
            key: Settings item key
            value: New value to set
            ignore_errors: silently ignore errors rather than raising (meaning the
                           value may *not* have been set)

        Raises:
            ConfigItemNotFoundError: If the key does not exist.
            ConfigValueValidationError: If the value is of the wrong type for the item.
        """
        try:
            item = self.get_item(key)
            if not item:
                raise ConfigItemNotFoundError(key)

            # Transform Registry for inbound normalization
            value = apply_inbound(key, value)

            success, error_message = item.set_value(value)

            if not success:
                raise ConfigValueValidationError(key, value, error_message)

            if key not in self._modified_keys:
                self._modified_keys.append(key)

            InstallerLogger.debug(f'Set "{key}" = "{"********" if item.is_password else apply_outbound(key, value)}"')
            self._notify_observers(key, item.get_value())
        except Exception as e:
            if ignore_errors:
                InstallerLogger.error(f'Ignored exception setting "{key}": "{e}"')
            else:
                raise

    def _notify_observers(self, key: str, value: Any):
        """Notify all registered observers for a given key."""
        try:
            super()._notify_observers(key, value)
        except Exception as e:
            InstallerLogger.error(f"Error in observer for key '{key}': {e}")
            raise

    def reset(self, key: Optional[str] = None) -> None:
        """Reset one item (or every item) to its default."""
        keys = [key] if key else self.all_keys()
        for k in keys:
            item = self.get_item(k)
            if not item:
                raise ConfigItemNotFoundError(k)
            item.reset()
            if k in self._modified_keys:
                self._modified_keys.remove(k)
        if key is None or key == KEY_SETTING_GENERATED_PASSWORD:
            self._generate_password()

    ###############################################################################################
    # typed views
    def network(self) -> NetworkSettings:
        proxy = None
        if self.get_value(KEY_SETTING_PROXY_ENABLED):
            proxy = ProxySettings(
                host=self.get_value(KEY_SETTING_PROXY_HOST) or "",
                port=self.get_value(KEY_SETTING_PROXY_PORT),
            )
        return NetworkSettings(
            bind_address=self.get_value(KEY_SETTING_BIND_ADDRESS),
            port=self.get_value(KEY_SETTING_PORT),
            dns_name=self.get_value(KEY_SETTING_DNS_NAME),
            proxy=proxy,
        )

    def certificate(self) -> CertificateSettings:
        strategy = self.get_value(KEY_SETTING_CERTIFICATE_STRATEGY)
        if strategy == CertificateStrategy.MANAGED_ACME:
            return ManagedAcmeCertificate(
                email=self.get_value(KEY_SETTING_ACME_EMAIL) or "",
                domain=self.get_value(KEY_SETTING_DNS_NAME) or "",
            )
        if strategy == CertificateStrategy.CUSTOM_IMPORT:
            return CustomImportCertificate(
                cert_path=self.get_value(KEY_SETTING_CUSTOM_CERT_PATH) or "",
                key_path=self.get_value(KEY_SETTING_CUSTOM_KEY_PATH) or "",
            )
        return SelfSignedCertificate()

    def sso(self) -> SSOSettings:
        provider = self.get_value(KEY_SETTING_SSO_PROVIDER)
        if provider == SSOProvider.SAML:
            return SamlSSO(endpoint=self.get_value(KEY_SETTING_SSO_ENDPOINT) or "")
        if provider == SSOProvider.OAUTH:
            return OAuthSSO(
                client_id=self.get_value(KEY_SETTING_SSO_CLIENT_ID) or "",
                client_secret=self.get_value(KEY_SETTING_SSO_CLIENT_SECRET) or "",
            )
        if provider == SSOProvider.ACTIVE_DIRECTORY:
            return ActiveDirectorySSO(domain=self.get_value(KEY_SETTING_SSO_DOMAIN) or "")
        return NoSSO()

    def credentials(self) -> Credentials:
        is_custom = bool(self.get_value(KEY_SETTING_USE_CUSTOM_PASSWORD))
        password = (
            self.get_value(KEY_SETTING_CUSTOM_PASSWORD) if is_custom else self.get_value(KEY_SETTING_GENERATED_PASSWORD)
        )
        return Credentials(
            username=(self.get_value(KEY_SETTING_ADMIN_USERNAME) or "").strip(),
            password=password or "",
            is_custom=is_custom,
        )

    ###############################################################################################
    # serialization
    def to_dict_values_only(self, include_passwords: bool = False) -> Dict[str, Any]:
        """Convert settings to a nested dictionary of keys and their current values."""
        output: Dict[str, Any] = {}
        for key, item in self._items.items():
            if item.is_password and not include_passwords:
                continue

            value = item.get_value()

            # Skip None values and empty strings to avoid validation issues on import
            if value is None or (isinstance(value, str) and value == ""):
                continue

            value = apply_outbound(key, value)

            parts = key.split(".")
            current_level = output
            for i, part in enumerate(parts):
                if i == len(parts) - 1:
                    current_level[part] = value
                else:
                    if part not in current_level:
                        current_level[part] = {}
                    current_level = current_level[part]
        return output

    def load_from_dict(self, settings: Dict[str, Any]) -> List[str]:
        """Apply values from a flat (dotted key) or nested dict.

        Invalid values are logged and skipped; unknown keys are logged.

        Returns a list of keys that were absent (left at defaults).
        """
        flat: Dict[str, Any] = {}

        def _flatten(prefix: str, d: Dict[str, Any]):
            for k, v in d.items():
                full_key = f"{prefix}.{k}" if prefix else str(k)
                if isinstance(v, dict) and full_key not in self._items:
                    _flatten(full_key, v)
                else:
                    flat[full_key] = v

        _flatten("", settings or {})

        for key, value in flat.items():
            if key not in self._items:
                InstallerLogger.warning(f"Unknown setting: {key}")
                continue
            if value is None:
                continue
            try:
                self.set_value(key, value)
            except ConfigValueValidationError as e:
                InstallerLogger.warning(f"Failed to set {key}: {e}")

        return [key for key in self._items.keys() if key not in flat]
