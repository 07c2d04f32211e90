#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.


"""
Security posture and certificate settings items for the Velociraptor installer.
"""

from velosetup.velo_constants import CertificateStrategy, ComplianceFramework, SecurityLevel

from velosetup.installer.core.config_item import ConfigItem
from velosetup.installer.configs.constants.settings_keys import (
    KEY_SETTING_ACME_EMAIL,
    KEY_SETTING_CERTIFICATE_STRATEGY,
    KEY_SETTING_COMPLIANCE_FRAMEWORK,
    KEY_SETTING_CUSTOM_CERT_PATH,
    KEY_SETTING_CUSTOM_KEY_PATH,
    KEY_SETTING_SECURITY_LEVEL,
)


def _enum_validator(enum_cls):
    def validate(x):
        if isinstance(x, enum_cls):
            return True, ""
        return False, f"Must be one of {[m.value for m in enum_cls]}"

    return validate


CONFIG_ITEM_SECURITY_LEVEL = ConfigItem(
    key=KEY_SETTING_SECURITY_LEVEL,
    label="Security Level",
    default_value=SecurityLevel.STANDARD,
    validator=_enum_validator(SecurityLevel),
    choices=[x.value for x in SecurityLevel],
    question="Select the security level (Basic, Standard or Maximum)",
)

CONFIG_ITEM_COMPLIANCE_FRAMEWORK = ConfigItem(
    key=KEY_SETTING_COMPLIANCE_FRAMEWORK,
    label="Compliance Framework",
    default_value=ComplianceFramework.NONE,
    validator=_enum_validator(ComplianceFramework),
    choices=[x.value for x in ComplianceFramework],
    question="Select a compliance framework to enforce",
)

CONFIG_ITEM_CERTIFICATE_STRATEGY = ConfigItem(
    key=KEY_SETTING_CERTIFICATE_STRATEGY,
    label="Certificate Strategy",
    default_value=CertificateStrategy.SELF_SIGNED,
    validator=_enum_validator(CertificateStrategy),
    choices=[x.value for x in CertificateStrategy],
    question="How should the server obtain its TLS certificate",
)

CONFIG_ITEM_ACME_EMAIL = ConfigItem(
    key=KEY_SETTING_ACME_EMAIL,
    label="ACME Contact Email",
    default_value="",
    validator=lambda x: isinstance(x, str),
    accept_blank=True,
    question="Contact email for the ACME (Let's Encrypt) account",
)

CONFIG_ITEM_CUSTOM_CERT_PATH = ConfigItem(
    key=KEY_SETTING_CUSTOM_CERT_PATH,
    label="Certificate File",
    default_value="",
    validator=lambda x: isinstance(x, str),
    accept_blank=True,
    question="Path to the PEM certificate to import",
)

CONFIG_ITEM_CUSTOM_KEY_PATH = ConfigItem(
    key=KEY_SETTING_CUSTOM_KEY_PATH,
    label="Private Key File",
    default_value="",
    validator=lambda x: isinstance(x, str),
    accept_blank=True,
    question="Path to the PEM private key to import",
)


def get_security_settings_item_dict():
    """Get all ConfigItem objects from this module."""
    return {value.key: value for value in globals().values() if isinstance(value, ConfigItem)}


ALL_SECURITY_SETTINGS_ITEMS_DICT = get_security_settings_item_dict()
