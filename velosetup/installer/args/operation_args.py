#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""
Mutually exclusive operations; with none given the installer runs an installation
"""


def add_operation_args(parser):
    operationArgGroup = parser.add_argument_group("Operations")
    mutex = operationArgGroup.add_mutually_exclusive_group()

    mutex.add_argument(
        "--validate-only",
        dest="validateOnly",
        action="store_true",
        help="Validate settings and print the derived configuration without installing",
    )
    mutex.add_argument(
        "--status",
        dest="status",
        action="store_true",
        help="Report whether the process, port and web interface are up",
    )
    mutex.add_argument(
        "--health",
        dest="health",
        action="store_true",
        help="Run the full health report for an existing installation",
    )
    mutex.add_argument(
        "--stop",
        dest="stop",
        action="store_true",
        help="Stop the Velociraptor service or process",
    )
    mutex.add_argument(
        "--uninstall",
        dest="uninstall",
        action="store_true",
        help="Stop Velociraptor and remove the binary, configuration and service definition",
    )
    operationArgGroup.add_argument(
        "--purge",
        dest="purge",
        action="store_true",
        help="With --uninstall, also remove the datastore and logs",
    )
