#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""
Arguments that load, override and export installer settings
"""


def add_settings_args(parser):
    settingsArgGroup = parser.add_argument_group("Settings")

    settingsArgGroup.add_argument(
        "--settings",
        "--import-settings",
        dest="settingsFile",
        metavar="<file>",
        default=None,
        help="Load settings from a JSON or YAML settings file",
    )
    settingsArgGroup.add_argument(
        "--export-settings",
        dest="exportSettingsFile",
        metavar="<file>",
        nargs="?",
        const="",
        default=None,
        help="Write the current settings to a file and exit (timestamped name if none given)",
    )
    settingsArgGroup.add_argument(
        "--install-dir",
        dest="installDir",
        metavar="<directory>",
        default=None,
        help="Installation directory (overrides the settings file)",
    )
    settingsArgGroup.add_argument(
        "--set",
        dest="settingOverrides",
        metavar="KEY=VALUE",
        action="append",
        default=[],
        help="Override a single setting, e.g. --set network.port=9889 (may be repeated)",
    )
    settingsArgGroup.add_argument(
        "--timeout",
        dest="reachabilityTimeout",
        metavar="<seconds>",
        type=float,
        default=None,
        help="How long to wait for the server to become reachable after installation",
    )
