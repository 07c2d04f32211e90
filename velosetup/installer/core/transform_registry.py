#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Normalize inbound values and format outbound values for the settings store."""

from enum import Enum
from typing import Any, Type

from velosetup.velo_constants import (
    CertificateStrategy,
    ComplianceFramework,
    DeploymentTier,
    SecurityLevel,
    SSOProvider,
)
from velosetup.velo_utils import str2bool
from velosetup.installer.configs.constants.settings_keys import (
    KEY_SETTING_CERTIFICATE_STRATEGY,
    KEY_SETTING_COMPLIANCE_FRAMEWORK,
    KEY_SETTING_DEPLOYMENT_TIER,
    KEY_SETTING_INSTALL_AS_SERVICE,
    KEY_SETTING_PORT,
    KEY_SETTING_PROXY_ENABLED,
    KEY_SETTING_PROXY_PORT,
    KEY_SETTING_SECURITY_LEVEL,
    KEY_SETTING_SSO_PROVIDER,
    KEY_SETTING_USE_CUSTOM_PASSWORD,
)

ENUM_SETTINGS = {
    KEY_SETTING_DEPLOYMENT_TIER: DeploymentTier,
    KEY_SETTING_SECURITY_LEVEL: SecurityLevel,
    KEY_SETTING_COMPLIANCE_FRAMEWORK: ComplianceFramework,
    KEY_SETTING_CERTIFICATE_STRATEGY: CertificateStrategy,
    KEY_SETTING_SSO_PROVIDER: SSOProvider,
}

INT_SETTINGS = (KEY_SETTING_PORT, KEY_SETTING_PROXY_PORT)

BOOL_SETTINGS = (
    KEY_SETTING_INSTALL_AS_SERVICE,
    KEY_SETTING_PROXY_ENABLED,
    KEY_SETTING_USE_CUSTOM_PASSWORD,
)


def _normalize_enum_keep_member(enum_cls: Type[Enum], value: Any) -> Any:
    """Map a member, its value or its name (case-insensitive) to the member; anything else passes through."""
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        for member in enum_cls:
            if lowered in (str(member.value).lower(), member.name.lower()):
                return member
        # "PCI_DSS" vs "PCI-DSS" and friends
        squashed = lowered.replace("-", "").replace("_", "")
        for member in enum_cls:
            if squashed == str(member.value).lower().replace("-", "").replace("_", ""):
                return member
    return value


def _normalize_int(value: Any) -> Any:
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    return value


def _normalize_bool(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return str2bool(value)
        except ValueError:
            return value
    return value


def apply_inbound(key: str, value: Any) -> Any:
    """Normalize inbound values by key.

    - Enum settings map to their enum members
    - Port settings map numeric strings to ints
    - Flag settings map "yes"/"no"/"true"/"false" strings to bools
    """
    if key in ENUM_SETTINGS:
        return _normalize_enum_keep_member(ENUM_SETTINGS[key], value)
    if key in INT_SETTINGS:
        return _normalize_int(value)
    if key in BOOL_SETTINGS:
        return _normalize_bool(value)
    return value


def apply_outbound(key: str, value: Any) -> Any:
    """Map internal values into plain values for display and serialization."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, tuple):
        return list(value)
    return value
