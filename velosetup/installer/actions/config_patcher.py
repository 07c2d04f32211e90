#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Targeted, order-preserving edits of the generated Velociraptor server configuration.

The base configuration is produced by ``velociraptor config generate`` and is
large; only a handful of keys need to change. Rather than load and re-dump it
(which would lose comments and ordering) the file is edited line by line:

- a top-level section is an unindented ``Name:`` header followed by its
  indented lines; blank lines inside it are kept, trailing blank lines and the
  next unindented line end it
- a child key owns its deeper-indented lines and any ``- `` list lines at its
  own indentation
- a targeted key block is replaced in place, a missing key is appended at the
  end of its section, a missing section is appended at the end of the file

Everything that is not targeted is preserved byte for byte, and applying the
same edits twice gives the same text as applying them once.
"""

import json
import os
import re
import shutil
import tempfile

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from velosetup.installer.configs.constants.constants import MANDATORY_CONFIG_SECTIONS
from velosetup.installer.core.effective_config import EffectiveConfiguration
from velosetup.installer.core.settings_models import (
    ActiveDirectorySSO,
    CustomImportCertificate,
    ManagedAcmeCertificate,
    OAuthSSO,
    SamlSSO,
)
from velosetup.installer.utils.exceptions import ConfigPatchError
from velosetup.installer.utils.logger_utils import InstallerLogger

DEFAULT_CHILD_INDENT = 2
SECONDS_PER_DAY = 86400


@dataclass(frozen=True)
class Replace:
    """Wrap a mapping to replace a key's whole block instead of merging into it."""

    value: Any


@dataclass
class SectionEdit:
    """Values to set under a top-level section (nested dicts are merged key by key)."""

    section: str
    values: Dict[str, Any] = field(default_factory=dict)


@dataclass
class TopLevelEdit:
    """A single top-level ``key: value`` line."""

    key: str
    value: Any


Edit = Union[SectionEdit, TopLevelEdit]


###################################################################################################
# rendering
_PLAIN_SCALAR_RE = re.compile(r"^[A-Za-z0-9_./][A-Za-z0-9_./@:+-]*$")
_YAML_KEYWORDS = {"true", "false", "yes", "no", "on", "off", "null", "~", "y", "n"}


def render_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (int, float)):
        return str(value)
    text = str(value)
    if (
        _PLAIN_SCALAR_RE.match(text)
        and text.lower() not in _YAML_KEYWORDS
        and not re.match(r"^[-+]?[0-9.]+$", text)
        and not text.endswith(":")
    ):
        return text
    # JSON strings are valid YAML double-quoted scalars
    return json.dumps(text)


def render_key(key: str, value: Any, indent: int) -> List[str]:
    """Render ``key: value`` at *indent* as one or more lines."""
    if isinstance(value, Replace):
        value = value.value
    pad = " " * indent
    if isinstance(value, dict):
        if not value:
            return [f"{pad}{key}: {{}}"]
        lines = [f"{pad}{key}:"]
        for k, v in value.items():
            lines.extend(render_key(k, v, indent + DEFAULT_CHILD_INDENT))
        return lines
    if isinstance(value, (list, tuple)):
        if not value:
            return [f"{pad}{key}: []"]
        lines = [f"{pad}{key}:"]
        for item in value:
            if isinstance(item, dict) and item:
                item_lines = []
                for k, v in item.items():
                    item_lines.extend(render_key(k, v, indent + DEFAULT_CHILD_INDENT))
                # first line of a mapping item carries the dash
                item_lines[0] = f"{pad}- " + item_lines[0][indent + DEFAULT_CHILD_INDENT :]
                lines.extend(item_lines)
            else:
                lines.append(f"{pad}- {render_scalar(item)}")
        return lines
    return [f"{pad}{key}: {render_scalar(value)}"]


###################################################################################################
# scanning
def _indent_of(line: str) -> int:
    return len(line) - len(line.lstrip(" "))


def _is_blank(line: str) -> bool:
    return not line.strip()


def _key_pattern(key: str, indent: int) -> re.Pattern:
    return re.compile(rf"^ {{{indent}}}{re.escape(key)}:(\s|$)")


def _find_key(lines: List[str], start: int, end: int, indent: int, key: str) -> Optional[int]:
    pattern = _key_pattern(key, indent)
    for i in range(start, end):
        if pattern.match(lines[i]):
            return i
    return None


def _block_end(lines: List[str], start: int, end: int, indent: int) -> int:
    """Index just past the last line owned by the key on lines[start] (trailing blanks excluded)."""
    last = start
    for i in range(start + 1, end):
        line = lines[i]
        if _is_blank(line):
            continue
        line_indent = _indent_of(line)
        if line_indent > indent or (line_indent == indent and line.lstrip().startswith("- ")):
            last = i
        else:
            break
    return last + 1


def _section_span(lines: List[str], header: int) -> int:
    """Index just past the last non-blank indented line following a top-level header."""
    last = header
    for i in range(header + 1, len(lines)):
        line = lines[i]
        if _is_blank(line):
            continue
        if line[0] in (" ", "\t") or line.startswith("- "):
            last = i
        else:
            break
    return last + 1


def _child_indent(lines: List[str], start: int, end: int, default: int) -> int:
    for i in range(start, end):
        stripped = lines[i].strip()
        if stripped and not stripped.startswith("#"):
            return _indent_of(lines[i])
    return default


def _has_inline_value(line: str) -> bool:
    rest = line.split(":", 1)[1].strip() if ":" in line else ""
    return bool(rest) and not rest.startswith("#")


###################################################################################################
# editing
def _patch_mapping(
    lines: List[str],
    start: int,
    end: int,
    indent: int,
    values: Dict[str, Any],
) -> Tuple[List[str], int]:
    """Apply *values* to the mapping whose children sit at *indent* within lines[start:end].

    Returns the edited lines and the new end of the span.
    """
    for key, value in values.items():
        idx = _find_key(lines, start, end, indent, key)
        if idx is None:
            new_lines = render_key(key, value, indent)
            lines[end:end] = new_lines
            end += len(new_lines)
            continue

        block_end = _block_end(lines, idx, end, indent)
        nested_start = idx + 1
        nested_indent = _child_indent(lines, nested_start, block_end, indent + DEFAULT_CHILD_INDENT)
        merge_nested = (
            isinstance(value, dict)
            and value
            and not _has_inline_value(lines[idx])
            and block_end > nested_start
            and nested_indent > indent
            and not lines[nested_start].lstrip().startswith("- ")
        )
        if merge_nested:
            lines, new_block_end = _patch_mapping(lines, nested_start, block_end, nested_indent, value)
            end += new_block_end - block_end
        else:
            new_lines = render_key(key, value, indent)
            lines[idx:block_end] = new_lines
            end += len(new_lines) - (block_end - idx)
    return lines, end


def _find_top_level(lines: List[str], key: str) -> Optional[int]:
    return _find_key(lines, 0, len(lines), 0, key)


def _append_at_eof(lines: List[str], new_lines: List[str]) -> None:
    # drop trailing blank lines so appends don't accumulate gaps
    while lines and _is_blank(lines[-1]):
        lines.pop()
    lines.extend(new_lines)


def patch_text(text: str, edits: Sequence[Edit]) -> str:
    """Apply *edits* to configuration *text* and return the new text."""
    if not text.strip():
        raise ConfigPatchError("Base configuration is empty")

    # keep the file's own line endings
    newline = "\r\n" if "\r\n" in text else "\n"
    trailing_newline = text.endswith(("\n", "\r"))
    lines = text.splitlines()

    for edit in edits:
        if isinstance(edit, TopLevelEdit):
            idx = _find_top_level(lines, edit.key)
            new_lines = render_key(edit.key, edit.value, 0)
            if idx is None:
                _append_at_eof(lines, new_lines)
            else:
                lines[idx : _block_end(lines, idx, len(lines), 0)] = new_lines
            continue

        header = _find_top_level(lines, edit.section)
        if header is None:
            _append_at_eof(lines, render_key(edit.section, edit.values or {}, 0))
            continue

        if _has_inline_value(lines[header]):
            # e.g. "GUI: {}" - rewrite as a block header
            lines[header] = f"{edit.section}:"
        end = _section_span(lines, header)
        indent = _child_indent(lines, header + 1, end, DEFAULT_CHILD_INDENT)
        lines, _ = _patch_mapping(lines, header + 1, end, indent, edit.values)

    return newline.join(lines) + (newline if trailing_newline else "")


def find_sections(text: str) -> List[str]:
    """Names of the top-level keys in *text*, in file order."""
    return [m.group(1) for m in re.finditer(r"^([A-Za-z_][A-Za-z0-9_]*):", text, re.MULTILINE)]


###################################################################################################
# edits derived from the effective configuration
def _authenticator(effective: EffectiveConfiguration) -> Dict[str, Any]:
    sso = effective.sso
    expiry = effective.session_timeout_hours * 60
    if isinstance(sso, SamlSSO):
        return {
            "type": "SAML",
            "saml_idp_metadata_url": sso.endpoint,
            "saml_root_url": f"https://{effective.network.dns_name}:{effective.network.port}/",
            "default_session_expiry_min": expiry,
        }
    if isinstance(sso, OAuthSSO):
        return {
            "type": "OIDC",
            "oauth_client_id": sso.client_id,
            "oauth_client_secret": sso.client_secret,
            "default_session_expiry_min": expiry,
        }
    if isinstance(sso, ActiveDirectorySSO):
        return {
            "type": "Azure",
            "tenant": sso.domain,
            "default_session_expiry_min": expiry,
        }
    return {"type": "Basic", "default_session_expiry_min": expiry}


def connections_per_second(max_clients: int) -> int:
    return max(10, max_clients // 10)


def _logging_values(effective: EffectiveConfiguration) -> Dict[str, Any]:
    return {
        "output_directory": effective.paths.logs_dir,
        "separate_logs_per_component": True,
        "max_age": effective.retention_days * SECONDS_PER_DAY,
    }


def build_section_edits(effective: EffectiveConfiguration) -> List[Edit]:
    """All edits the PatchConfig step applies."""
    frontend: Dict[str, Any] = {"hostname": effective.network.dns_name}
    if isinstance(effective.certificate, CustomImportCertificate):
        frontend["tls_certificate_filename"] = os.path.abspath(os.path.expanduser(effective.certificate.cert_path))
        frontend["tls_private_key_filename"] = os.path.abspath(os.path.expanduser(effective.certificate.key_path))
    if effective.network.proxy:
        frontend["proxy"] = effective.network.proxy.url
    frontend["resources"] = {"connections_per_second": connections_per_second(effective.max_clients)}

    edits: List[Edit] = [
        SectionEdit(
            "GUI",
            {
                "bind_address": effective.network.bind_address,
                "bind_port": effective.network.port,
                "authenticator": Replace(_authenticator(effective)),
            },
        ),
        SectionEdit("Frontend", frontend),
        SectionEdit(
            "Datastore",
            {
                "implementation": effective.datastore_engine,
                "location": effective.paths.datastore_dir,
                "filestore_directory": effective.paths.datastore_dir,
            },
        ),
        SectionEdit("Logging", _logging_values(effective)),
    ]
    if isinstance(effective.certificate, ManagedAcmeCertificate):
        edits.append(TopLevelEdit("autocert_domain", effective.certificate.domain))
        edits.append(TopLevelEdit("autocert_cert_cache", effective.paths.autocert_cache_dir))
    return edits


def build_compliance_edits(effective: EffectiveConfiguration) -> List[Edit]:
    """The compliance-owned subset: session expiry (via the authenticator) and log retention."""
    return [
        SectionEdit("GUI", {"authenticator": Replace(_authenticator(effective))}),
        SectionEdit("Logging", _logging_values(effective)),
    ]


###################################################################################################
class ConfigFilePatcher:
    """Applies edits to a configuration file on disk (temp file + atomic rename)."""

    def __init__(self, path: str):
        self.path = path

    def read(self) -> str:
        try:
            with open(self.path, "r", encoding="utf-8", newline="") as f:
                return f.read()
        except OSError as e:
            raise ConfigPatchError(f"Unable to read {self.path}: {e}") from e

    def write(self, text: str) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", newline="", dir=directory, prefix=".patch-", delete=False
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(text)
            if os.path.exists(self.path):
                shutil.copymode(self.path, tmp_name)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise ConfigPatchError(f"Unable to write {self.path}: {e}") from e

    def apply(self, edits: Sequence[Edit]) -> bool:
        """Apply *edits*; returns True if the file content changed."""
        original = self.read()
        missing = [
            e.section
            for e in edits
            if isinstance(e, SectionEdit)
            and e.section in MANDATORY_CONFIG_SECTIONS
            and e.section not in find_sections(original)
        ]
        for section in missing:
            InstallerLogger.warning(f"Section {section} not found in {self.path}, appending it")
        patched = patch_text(original, edits)
        for edit in edits:
            if isinstance(edit, SectionEdit) and edit.section in MANDATORY_CONFIG_SECTIONS:
                if edit.section not in find_sections(patched):
                    raise ConfigPatchError(f"Unable to locate or create section {edit.section} in {self.path}")
        if patched == original:
            InstallerLogger.debug(f"{self.path} already up to date")
            return False
        self.write(patched)
        return True

    def patch(self, effective: EffectiveConfiguration) -> bool:
        return self.apply(build_section_edits(effective))
