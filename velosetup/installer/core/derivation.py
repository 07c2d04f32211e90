#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Derive an EffectiveConfiguration from the settings store.

Overlapping domains are merged left to right, each by its own pure function:

    tier defaults -> security defaults -> compliance overrides -> explicit user overrides

A selected compliance framework owns mfa, TLS version and session timeout no
matter which security level was chosen, and forces audit logging on when it
requires auditing. Explicit user choices (custom password, imported
certificate files) are applied last and are never overridden.
"""

import os

from typing import Any, Dict

from velosetup.velo_common import get_platform_name
from velosetup.velo_constants import (
    PLATFORM_WINDOWS,
    VELOCIRAPTOR_AUTOCERT_CACHE_DIR,
    VELOCIRAPTOR_BIN_DIR,
    VELOCIRAPTOR_BINARY_NAME,
    VELOCIRAPTOR_CONFIG_FILENAME,
    VELOCIRAPTOR_DATASTORE_DIR,
    VELOCIRAPTOR_LOGS_DIR,
    VELOCIRAPTOR_PID_FILENAME,
    VELOCIRAPTOR_POLICY_FILENAME,
    VELOCIRAPTOR_PROCESS_LOG_FILENAME,
)
from velosetup.installer.configs.artifact_packs import expand_artifact_packs
from velosetup.installer.configs.constants.settings_keys import (
    KEY_SETTING_ARTIFACT_PACKS,
    KEY_SETTING_CERTIFICATE_STRATEGY,
    KEY_SETTING_COMPLIANCE_FRAMEWORK,
    KEY_SETTING_DATASTORE_DIR,
    KEY_SETTING_DEPLOYMENT_TIER,
    KEY_SETTING_INSTALL_AS_SERVICE,
    KEY_SETTING_INSTALL_DIR,
    KEY_SETTING_SECURITY_LEVEL,
)
from velosetup.installer.configs.derivation_tables import (
    CERTIFICATE_TABLE,
    COMPLIANCE_TABLE,
    SECURITY_TABLE,
    TIER_TABLE,
)
from velosetup.installer.core.effective_config import EffectiveConfiguration, InstallPaths
from velosetup.installer.core.validation import validate_settings
from velosetup.installer.utils.exceptions import ValidationError


def merge_tier(acc: Dict[str, Any], tier) -> Dict[str, Any]:
    defaults = TIER_TABLE[tier]
    return {
        **acc,
        "tier": tier,
        "collector_count": defaults.collector_count,
        "max_clients": defaults.max_clients,
        "datastore_engine": defaults.datastore_engine,
        "clustering_enabled": defaults.clustering_enabled,
    }


def merge_security(acc: Dict[str, Any], level) -> Dict[str, Any]:
    defaults = SECURITY_TABLE[level]
    return {
        **acc,
        "security_level": level,
        "password_complexity": defaults.password_complexity,
        "session_timeout_hours": defaults.session_timeout_hours,
        "tls_version": defaults.tls_version,
        "audit_logging": defaults.audit_logging,
        "mfa_required": defaults.mfa_required,
    }


def merge_compliance(acc: Dict[str, Any], framework) -> Dict[str, Any]:
    overrides = COMPLIANCE_TABLE[framework]
    result = {
        **acc,
        "compliance": framework,
        "audit_required": overrides.audit_required,
        "retention_days": overrides.retention_days,
        "access_control_level": overrides.access_control_level,
    }
    if overrides.mfa_required is not None:
        result["mfa_required"] = overrides.mfa_required
    if overrides.tls_version is not None:
        result["tls_version"] = overrides.tls_version
    if overrides.session_timeout_hours is not None:
        result["session_timeout_hours"] = overrides.session_timeout_hours
    if overrides.audit_required:
        result["audit_logging"] = True
    return result


def merge_certificate(acc: Dict[str, Any], strategy) -> Dict[str, Any]:
    defaults = CERTIFICATE_TABLE[strategy]
    return {
        **acc,
        "certificate_strategy": strategy,
        "certificate_algorithm": defaults.algorithm,
        "certificate_auto_renewal": defaults.auto_renewal,
        "certificate_duration_days": defaults.duration_days,
    }


def merge_user_overrides(acc: Dict[str, Any], store) -> Dict[str, Any]:
    """Apply explicit user choices last: credentials and the certificate variant (with any imported files)."""
    return {
        **acc,
        "credentials": store.credentials(),
        "certificate": store.certificate(),
    }


def resolve_paths(store, platform_name: str = None) -> InstallPaths:
    install_dir = os.path.abspath(os.path.expanduser(store.get_value(KEY_SETTING_INSTALL_DIR)))
    datastore_dir = (store.get_value(KEY_SETTING_DATASTORE_DIR) or "").strip()
    datastore_dir = (
        os.path.abspath(os.path.expanduser(datastore_dir))
        if datastore_dir
        else os.path.join(install_dir, VELOCIRAPTOR_DATASTORE_DIR)
    )
    binary_name = VELOCIRAPTOR_BINARY_NAME
    if (platform_name or get_platform_name()) == PLATFORM_WINDOWS:
        binary_name += ".exe"
    logs_dir = os.path.join(install_dir, VELOCIRAPTOR_LOGS_DIR)
    return InstallPaths(
        install_dir=install_dir,
        binary_path=os.path.join(install_dir, VELOCIRAPTOR_BIN_DIR, binary_name),
        config_path=os.path.join(install_dir, VELOCIRAPTOR_CONFIG_FILENAME),
        datastore_dir=datastore_dir,
        logs_dir=logs_dir,
        pid_file=os.path.join(install_dir, VELOCIRAPTOR_PID_FILENAME),
        process_log_file=os.path.join(logs_dir, VELOCIRAPTOR_PROCESS_LOG_FILENAME),
        policy_file=os.path.join(install_dir, VELOCIRAPTOR_POLICY_FILENAME),
        autocert_cache_dir=os.path.join(install_dir, VELOCIRAPTOR_AUTOCERT_CACHE_DIR),
    )


def derive(store, validate: bool = True, platform_name: str = None) -> EffectiveConfiguration:
    """Build a fresh EffectiveConfiguration snapshot from the store.

    Args:
        store: SettingsStore to read (never mutated)
        validate: run validate_settings first and refuse invalid settings
        platform_name: override platform detection (binary naming)

    Raises:
        ValidationError: If validate is True and the settings have issues.
    """
    if validate:
        issues = validate_settings(store)
        if issues:
            raise ValidationError(issues)

    acc: Dict[str, Any] = {}
    acc = merge_tier(acc, store.get_value(KEY_SETTING_DEPLOYMENT_TIER))
    acc = merge_security(acc, store.get_value(KEY_SETTING_SECURITY_LEVEL))
    acc = merge_compliance(acc, store.get_value(KEY_SETTING_COMPLIANCE_FRAMEWORK))
    acc = merge_certificate(acc, store.get_value(KEY_SETTING_CERTIFICATE_STRATEGY))
    acc = merge_user_overrides(acc, store)

    return EffectiveConfiguration(
        **acc,
        network=store.network(),
        sso=store.sso(),
        paths=resolve_paths(store, platform_name),
        install_as_service=bool(store.get_value(KEY_SETTING_INSTALL_AS_SERVICE)),
        artifact_ids=expand_artifact_packs(store.get_value(KEY_SETTING_ARTIFACT_PACKS)),
    )
