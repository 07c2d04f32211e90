#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""
Artifact pack definitions.

A pack is a named bundle of Velociraptor artifact identifiers. Packs overlap
(the same artifact may appear in several packs), so expansion de-duplicates by
identifier while keeping first-seen order.
"""

from typing import Dict, Iterable, Tuple

ARTIFACT_PACK_ESSENTIAL = "Essential"
ARTIFACT_PACK_WINDOWS = "Windows"
ARTIFACT_PACK_LINUX = "Linux"
ARTIFACT_PACK_MACOS = "MacOS"
ARTIFACT_PACK_RANSOMWARE = "Ransomware"
ARTIFACT_PACK_THREAT_HUNTING = "ThreatHunting"
ARTIFACT_PACK_MEMORY = "Memory"

ARTIFACT_PACKS: Dict[str, Tuple[str, ...]] = {
    ARTIFACT_PACK_ESSENTIAL: (
        "Generic.Client.Info",
        "Generic.Client.Stats",
        "Server.Monitor.Health",
        "Generic.System.Pstree",
    ),
    ARTIFACT_PACK_WINDOWS: (
        "Generic.Client.Info",
        "Windows.System.Pslist",
        "Windows.Network.Netstat",
        "Windows.Sys.Users",
        "Windows.EventLogs.EvtxHunter",
        "Windows.Forensics.Prefetch",
        "Windows.Registry.RecentDocs",
    ),
    ARTIFACT_PACK_LINUX: (
        "Generic.Client.Info",
        "Linux.Sys.Pslist",
        "Linux.Network.Netstat",
        "Linux.Sys.Users",
        "Linux.Syslog.SSHLogin",
        "Linux.Sys.Crontab",
    ),
    ARTIFACT_PACK_MACOS: (
        "Generic.Client.Info",
        "MacOS.Sys.Pslist",
        "MacOS.Network.Netstat",
        "MacOS.Sys.Users",
        "MacOS.System.LaunchAgents",
    ),
    ARTIFACT_PACK_RANSOMWARE: (
        "Windows.Forensics.Prefetch",
        "Windows.EventLogs.EvtxHunter",
        "Windows.Detection.Amcache",
        "Windows.Search.FileFinder",
        "Generic.Detection.Yara.Glob",
    ),
    ARTIFACT_PACK_THREAT_HUNTING: (
        "Generic.System.Pstree",
        "Windows.Detection.Autoruns",
        "Windows.Network.Netstat",
        "Linux.Network.Netstat",
        "Generic.Detection.Yara.Glob",
    ),
    ARTIFACT_PACK_MEMORY: (
        "Windows.Memory.Acquisition",
        "Linux.Memory.Acquisition",
        "Generic.Detection.Yara.Process",
    ),
}

KNOWN_ARTIFACT_PACKS = tuple(ARTIFACT_PACKS.keys())


def is_known_pack(name: str) -> bool:
    return name in ARTIFACT_PACKS


def expand_artifact_packs(pack_names: Iterable[str]) -> Tuple[str, ...]:
    """Expand pack names into artifact identifiers, de-duplicated, first-seen order preserved.

    Unknown pack names contribute nothing (the validator reports them).
    """
    seen = set()
    result = []
    for pack_name in pack_names or ():
        for artifact_id in ARTIFACT_PACKS.get(pack_name, ()):
            if artifact_id not in seen:
                seen.add(artifact_id)
                result.append(artifact_id)
    return tuple(result)
