#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""
Enum-keyed lookup tables used to derive the effective configuration.

Each table maps one mutually-exclusive settings choice onto the concrete
values it implies. The merge order (tier, security, compliance, explicit
user overrides) lives in velosetup.installer.core.derivation.
"""

from dataclasses import dataclass
from typing import Optional

from velosetup.velo_constants import (
    CertificateStrategy,
    ComplianceFramework,
    DeploymentTier,
    SecurityLevel,
)

DATASTORE_FILE_BASE = "FileBaseDataStore"
DATASTORE_REMOTE_FILE = "RemoteFileDataStore"


@dataclass(frozen=True)
class TierDefaults:
    collector_count: int
    max_clients: int
    datastore_engine: str
    clustering_enabled: bool


@dataclass(frozen=True)
class SecurityDefaults:
    password_complexity: str
    session_timeout_hours: int
    tls_version: str
    audit_logging: bool
    mfa_required: bool


@dataclass(frozen=True)
class ComplianceOverrides:
    audit_required: bool
    retention_days: int
    access_control_level: str
    # None means "no override"; the security level's value stands
    mfa_required: Optional[bool] = None
    tls_version: Optional[str] = None
    session_timeout_hours: Optional[int] = None


@dataclass(frozen=True)
class CertificateDefaults:
    algorithm: str
    auto_renewal: bool
    duration_days: Optional[int]


TIER_TABLE = {
    DeploymentTier.STANDALONE: TierDefaults(1, 50, DATASTORE_FILE_BASE, False),
    DeploymentTier.SERVER: TierDefaults(1, 1000, DATASTORE_FILE_BASE, False),
    DeploymentTier.ENTERPRISE: TierDefaults(4, 10000, DATASTORE_REMOTE_FILE, True),
}

SECURITY_TABLE = {
    SecurityLevel.BASIC: SecurityDefaults("low", 24, "1.2", False, False),
    SecurityLevel.STANDARD: SecurityDefaults("medium", 8, "1.3", True, False),
    SecurityLevel.MAXIMUM: SecurityDefaults("high", 4, "1.3", True, True),
}

COMPLIANCE_TABLE = {
    ComplianceFramework.NONE: ComplianceOverrides(False, 30, "standard"),
    ComplianceFramework.SOX: ComplianceOverrides(True, 2555, "role-based", True, "1.2", 8),
    ComplianceFramework.HIPAA: ComplianceOverrides(True, 2190, "strict", True, "1.2", 2),
    ComplianceFramework.PCI_DSS: ComplianceOverrides(True, 365, "strict", True, "1.2", 1),
    ComplianceFramework.GDPR: ComplianceOverrides(True, 1095, "role-based", True, "1.2", 4),
}

CERTIFICATE_TABLE = {
    CertificateStrategy.SELF_SIGNED: CertificateDefaults("ECDSA-P256", False, 365),
    CertificateStrategy.MANAGED_ACME: CertificateDefaults("RSA-2048", True, 90),
    CertificateStrategy.CUSTOM_IMPORT: CertificateDefaults("imported", False, None),
}
