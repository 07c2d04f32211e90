#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""The immutable, fully-derived configuration snapshot consumed by an installation run."""

import dataclasses

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from velosetup.velo_constants import (
    CertificateStrategy,
    ComplianceFramework,
    DeploymentTier,
    SecurityLevel,
)
from velosetup.installer.core.settings_models import (
    CertificateSettings,
    Credentials,
    NetworkSettings,
    SSOSettings,
)

MASKED_VALUE = "********"
_SECRET_FIELDS = ("password", "client_secret")


@dataclass(frozen=True)
class InstallPaths:
    install_dir: str
    binary_path: str
    config_path: str
    datastore_dir: str
    logs_dir: str
    pid_file: str
    process_log_file: str
    policy_file: str
    autocert_cache_dir: str


@dataclass(frozen=True)
class EffectiveConfiguration:
    # selections
    tier: DeploymentTier
    security_level: SecurityLevel
    compliance: ComplianceFramework
    certificate_strategy: CertificateStrategy

    # deployment tier
    collector_count: int
    max_clients: int
    datastore_engine: str
    clustering_enabled: bool

    # security level (possibly overridden by compliance)
    password_complexity: str
    session_timeout_hours: int
    tls_version: str
    audit_logging: bool
    mfa_required: bool

    # compliance
    audit_required: bool
    retention_days: int
    access_control_level: str

    # certificate
    certificate_algorithm: str
    certificate_auto_renewal: bool
    certificate_duration_days: Optional[int]

    network: NetworkSettings
    certificate: CertificateSettings
    sso: SSOSettings
    credentials: Credentials
    paths: InstallPaths
    install_as_service: bool
    artifact_ids: Tuple[str, ...] = ()

    @property
    def compliance_enforced(self) -> bool:
        return self.compliance != ComplianceFramework.NONE

    def to_dict(self, mask_secrets: bool = True) -> Dict[str, Any]:
        """Plain-data rendering for display and sidecar files; secrets are masked unless asked otherwise."""
        return _plain(self, mask_secrets)


def _plain(value: Any, mask_secrets: bool) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        result: Dict[str, Any] = {}
        for f in dataclasses.fields(value):
            field_value = getattr(value, f.name)
            if mask_secrets and f.name in _SECRET_FIELDS and field_value:
                result[f.name] = MASKED_VALUE
            else:
                result[f.name] = _plain(field_value, mask_secrets)
        # variant tag for certificate/SSO unions
        for tag in ("strategy", "provider"):
            tag_value = getattr(type(value), tag, None)
            if isinstance(tag_value, Enum):
                result[tag] = tag_value.value
        return result
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (tuple, list)):
        return [_plain(v, mask_secrets) for v in value]
    return value
