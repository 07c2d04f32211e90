#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.


"""Build and format configuration and run summaries for display."""

from enum import Enum
from typing import List, Optional, Tuple

from velosetup.installer.configs.constants.constants import REMEDIATION_SUGGESTIONS
from velosetup.installer.configs.constants.enums import RunStatus
from velosetup.installer.core.effective_config import MASKED_VALUE


def build_configuration_summary_items(effective) -> List[Tuple[str, str]]:
    """Build a list of (label, value) pairs describing an EffectiveConfiguration.

    Args:
        effective: EffectiveConfiguration to describe

    Returns:
        List of (label, value) tuples in display order
    """
    network = effective.network
    credentials = effective.credentials

    summary_items = [
        ("Installation Directory", effective.paths.install_dir),
        ("Deployment Tier", effective.tier),
        ("Run As Service", effective.install_as_service),
        ("Max Clients", effective.max_clients),
        ("Datastore", f"{effective.datastore_engine} ({effective.paths.datastore_dir})"),
        ("Security Level", effective.security_level),
        ("Compliance Framework", effective.compliance),
        ("TLS Version", effective.tls_version),
        ("MFA Required", effective.mfa_required),
        ("Session Timeout", f"{effective.session_timeout_hours} hour(s)"),
        ("Audit Logging", effective.audit_logging),
        ("Certificate", effective.certificate_strategy),
        ("GUI Address", f"{network.bind_address}:{network.port}"),
        ("DNS Name", network.dns_name),
        ("SSO Provider", type(effective.sso).provider),
        ("Administrator", credentials.username),
        ("Administrator Password", credentials.password),
        ("Artifacts", len(effective.artifact_ids)),
    ]

    # only relevant when a proxy is configured
    if network.proxy is not None:
        dns_index = [label for label, _ in summary_items].index("DNS Name")
        summary_items.insert(dns_index + 1, ("Proxy", network.proxy.url))
    if effective.compliance_enforced:
        summary_items.append(("Log Retention", f"{effective.retention_days} day(s)"))

    return summary_items


def format_summary_value(label: str, value) -> str:
    """Format a value for display, masking passwords and secrets."""
    lower = label.lower()
    if ("password" in lower or "secret" in lower) and value:
        return MASKED_VALUE
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, Enum):
        return str(value.value)
    if value is None or value == "":
        return "Not set"
    return str(value)


def format_configuration_summary(effective) -> List[str]:
    items = build_configuration_summary_items(effective)
    width = max(len(label) for label, _ in items)
    return [f"{label.ljust(width)} : {format_summary_value(label, value)}" for label, value in items]


def get_remediation_suggestions(run) -> List[str]:
    """Suggestions keyed by the step that failed the run (or by failed non-fatal steps)."""
    suggestions: List[str] = []
    failed_step = run.failed_step
    candidates = [failed_step] if failed_step else [s for s in run.steps if s.failed]
    for step in candidates:
        for hint in REMEDIATION_SUGGESTIONS.get(step.name, []):
            if hint not in suggestions:
                suggestions.append(hint)
    return suggestions


def build_run_summary_lines(run, url: Optional[str] = None) -> List[str]:
    """Human-readable account of a finished (or in-progress) installation run."""
    lines = [f"Installation {run.id}: {run.status.value}"]
    if run.started_at and run.finished_at:
        lines[0] += f" in {(run.finished_at - run.started_at).total_seconds():.1f}s"

    for step in run.steps:
        lines.append(f"  {step.describe()}")

    if run.warnings:
        lines.append(f"Warnings ({len(run.warnings)}):")
        lines.extend(f"  - {w}" for w in run.warnings)

    if run.status == RunStatus.SUCCEEDED:
        network = run.effective.network
        lines.append(f"Web interface: {url or f'https://{network.dns_name}:{network.port}/'}")
        lines.append(f"Username: {run.effective.credentials.username}")
        if not run.effective.credentials.is_custom:
            # the generated password is shown exactly once, after a successful run
            lines.append(f"Password: {run.effective.credentials.password}")
    elif suggestions := get_remediation_suggestions(run):
        lines.append("Suggestions:")
        lines.extend(f"  - {s}" for s in suggestions)

    return lines
