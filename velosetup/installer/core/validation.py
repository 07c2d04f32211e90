#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""
Validation helpers for Velociraptor installer settings.

Every rule runs on every call (no short-circuit), so a user with three
problems sees three issues at once. Rules only read the store.
"""

import ipaddress
import os
import re

from dataclasses import dataclass
from typing import List
from urllib.parse import urlparse

from velosetup.velo_constants import (
    CertificateStrategy,
    MAX_PORT,
    MIN_PASSWORD_LENGTH,
    MIN_SERVICE_PORT,
    SSOProvider,
)
from velosetup.installer.configs.artifact_packs import is_known_pack, KNOWN_ARTIFACT_PACKS
from velosetup.installer.configs.constants.settings_keys import (
    KEY_SETTING_ACME_EMAIL,
    KEY_SETTING_ADMIN_USERNAME,
    KEY_SETTING_ARTIFACT_PACKS,
    KEY_SETTING_BIND_ADDRESS,
    KEY_SETTING_CERTIFICATE_STRATEGY,
    KEY_SETTING_CUSTOM_CERT_PATH,
    KEY_SETTING_CUSTOM_KEY_PATH,
    KEY_SETTING_CUSTOM_PASSWORD,
    KEY_SETTING_PORT,
    KEY_SETTING_PROXY_ENABLED,
    KEY_SETTING_PROXY_HOST,
    KEY_SETTING_PROXY_PORT,
    KEY_SETTING_SSO_CLIENT_ID,
    KEY_SETTING_SSO_CLIENT_SECRET,
    KEY_SETTING_SSO_DOMAIN,
    KEY_SETTING_SSO_ENDPOINT,
    KEY_SETTING_SSO_PROVIDER,
    KEY_SETTING_USE_CUSTOM_PASSWORD,
)
from velosetup.installer.utils.logger_utils import InstallerLogger

PORT_RANGE_MESSAGE = f"Port must be between {MIN_SERVICE_PORT} and {MAX_PORT}"
CUSTOM_PASSWORD_REQUIRED_MESSAGE = "Custom password is required when custom password is enabled"

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass
class ValidationIssue:
    key: str
    label: str
    message: str


def _is_non_empty_str(value) -> bool:
    return isinstance(value, str) and len(value.strip()) > 0


def _is_port_in_range(value, low: int, high: int) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and low <= value <= high


def _validate_port(store, add_issue) -> None:
    if not _is_port_in_range(store.get_value(KEY_SETTING_PORT), MIN_SERVICE_PORT, MAX_PORT):
        add_issue(KEY_SETTING_PORT, PORT_RANGE_MESSAGE)


def _validate_bind_address(store, add_issue) -> None:
    bind_address = store.get_value(KEY_SETTING_BIND_ADDRESS)
    try:
        ipaddress.ip_address(str(bind_address).strip())
    except ValueError:
        add_issue(KEY_SETTING_BIND_ADDRESS, f"'{bind_address}' is not a valid IP address")


def _validate_custom_password(store, add_issue) -> None:
    if not store.get_value(KEY_SETTING_USE_CUSTOM_PASSWORD):
        return
    password = store.get_value(KEY_SETTING_CUSTOM_PASSWORD)
    if not _is_non_empty_str(password):
        add_issue(KEY_SETTING_CUSTOM_PASSWORD, CUSTOM_PASSWORD_REQUIRED_MESSAGE)
    elif len(password) < MIN_PASSWORD_LENGTH:
        add_issue(
            KEY_SETTING_CUSTOM_PASSWORD,
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
        )


def _validate_username(store, add_issue) -> None:
    if not _is_non_empty_str(store.get_value(KEY_SETTING_ADMIN_USERNAME)):
        add_issue(KEY_SETTING_ADMIN_USERNAME, "Administrator username is required")


def _validate_certificate(store, add_issue) -> None:
    strategy = store.get_value(KEY_SETTING_CERTIFICATE_STRATEGY)
    if strategy == CertificateStrategy.CUSTOM_IMPORT:
        for key, what in (
            (KEY_SETTING_CUSTOM_CERT_PATH, "Certificate file"),
            (KEY_SETTING_CUSTOM_KEY_PATH, "Private key file"),
        ):
            path = store.get_value(key)
            if not _is_non_empty_str(path):
                add_issue(key, f"{what} is required when importing a custom certificate")
            elif not os.path.isfile(os.path.expanduser(path)):
                add_issue(key, f"{what} '{path}' does not exist")
    elif strategy == CertificateStrategy.MANAGED_ACME:
        email = store.get_value(KEY_SETTING_ACME_EMAIL)
        if not (_is_non_empty_str(email) and _EMAIL_RE.match(email.strip())):
            add_issue(KEY_SETTING_ACME_EMAIL, "A valid email address is required for ACME certificates")


def _validate_proxy(store, add_issue) -> None:
    if not store.get_value(KEY_SETTING_PROXY_ENABLED):
        return
    if not _is_non_empty_str(store.get_value(KEY_SETTING_PROXY_HOST)):
        add_issue(KEY_SETTING_PROXY_HOST, "Proxy host is required when a proxy is enabled")
    if not _is_port_in_range(store.get_value(KEY_SETTING_PROXY_PORT), 1, MAX_PORT):
        add_issue(KEY_SETTING_PROXY_PORT, f"Proxy port must be between 1 and {MAX_PORT}")


def _validate_sso(store, add_issue) -> None:
    provider = store.get_value(KEY_SETTING_SSO_PROVIDER)
    if provider == SSOProvider.SAML:
        endpoint = store.get_value(KEY_SETTING_SSO_ENDPOINT)
        parsed = urlparse(endpoint.strip()) if _is_non_empty_str(endpoint) else None
        if not (parsed and parsed.scheme in ("http", "https") and parsed.netloc):
            add_issue(KEY_SETTING_SSO_ENDPOINT, "SAML requires an http(s) endpoint URL")
    elif provider == SSOProvider.OAUTH:
        if not _is_non_empty_str(store.get_value(KEY_SETTING_SSO_CLIENT_ID)):
            add_issue(KEY_SETTING_SSO_CLIENT_ID, "OAuth requires a client ID")
        if not _is_non_empty_str(store.get_value(KEY_SETTING_SSO_CLIENT_SECRET)):
            add_issue(KEY_SETTING_SSO_CLIENT_SECRET, "OAuth requires a client secret")
    elif provider == SSOProvider.ACTIVE_DIRECTORY:
        if not _is_non_empty_str(store.get_value(KEY_SETTING_SSO_DOMAIN)):
            add_issue(KEY_SETTING_SSO_DOMAIN, "Active Directory requires a domain")


def _validate_artifact_packs(store, add_issue) -> None:
    unknown = [p for p in (store.get_value(KEY_SETTING_ARTIFACT_PACKS) or []) if not is_known_pack(p)]
    if unknown:
        add_issue(
            KEY_SETTING_ARTIFACT_PACKS,
            f"Unknown artifact pack(s) {', '.join(unknown)} (known: {', '.join(KNOWN_ARTIFACT_PACKS)})",
        )


_RULES = (
    _validate_port,
    _validate_bind_address,
    _validate_custom_password,
    _validate_username,
    _validate_certificate,
    _validate_proxy,
    _validate_sso,
    _validate_artifact_packs,
)


def validate_settings(store) -> List[ValidationIssue]:
    """Validate cross-field rules for the current settings.

    Returns:
        A list of ValidationIssue objects. Empty if all checks pass.
    """
    issues: List[ValidationIssue] = []

    def add_issue(key: str, reason: str):
        item = store.get_item(key)
        label = item.label if item else key
        issues.append(ValidationIssue(key=key, label=label, message=reason))

    for rule in _RULES:
        try:
            rule(store, add_issue)
        except Exception as e:
            InstallerLogger.error(f"Error validating settings ({rule.__name__}): {e}")

    return issues


def format_validation_summary(issues: List[ValidationIssue]) -> str:
    """Create a human-readable summary of validation issues."""
    if not issues:
        return ""
    lines = [
        "Some settings need attention:",
    ]
    for issue in issues:
        lines.append(f"- {issue.label}: {issue.message}")
    return "\n".join(lines)
