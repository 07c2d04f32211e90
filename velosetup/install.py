#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

import argparse
import os
import sys

from velosetup.velo_constants import VELOSETUP_VERSION

from velosetup.installer.args.basic_args import add_basic_args
from velosetup.installer.args.operation_args import add_operation_args
from velosetup.installer.args.settings_args import add_settings_args

from velosetup.installer.configs.constants.constants import REACHABILITY_TIMEOUT_SECONDS
from velosetup.installer.configs.constants.enums import InstallerResult, OverallHealth, RunStatus
from velosetup.installer.configs.constants.settings_keys import KEY_SETTING_INSTALL_DIR

from velosetup.installer.controllers import InstallationController
from velosetup.installer.core.derivation import derive
from velosetup.installer.core.settings_store import SettingsStore
from velosetup.installer.core.validation import format_validation_summary, validate_settings

from velosetup.installer.utils.exceptions import (
    ConfigItemNotFoundError,
    ConfigValueValidationError,
    FileOperationError,
    ValidationError,
)
from velosetup.installer.utils.logger_utils import InstallerLogger
from velosetup.installer.utils.settings_file_handler import SettingsFileHandler
from velosetup.installer.utils.summary_utils import build_run_summary_lines, format_configuration_summary

###################################################################################################
SCRIPT_NAME = os.path.basename(__file__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_INVALID_SETTINGS = 2


def build_arg_parser(parser: argparse.ArgumentParser) -> None:
    """Add arguments specific to the installer itself"""
    add_basic_args(parser)
    add_settings_args(parser)
    add_operation_args(parser)


def configure_logging(parsed_args):
    if parsed_args.quiet:
        InstallerLogger.set_console_output(False)
    if parsed_args.debug:
        InstallerLogger.set_debug_enabled(True)
    if parsed_args.logToFile is not None:
        if parsed_args.logToFile == "":
            log_filename = InstallerLogger.generate_timestamped_filename()
            InstallerLogger.info(f"No log filename specified, using: {log_filename}")
        else:
            log_filename = parsed_args.logToFile
        InstallerLogger.set_log_file(log_filename)
        InstallerLogger.info(f"Logging to file: {log_filename}")


def load_settings(parsed_args) -> SettingsStore:
    """Build the settings store from defaults, the settings file, and command-line overrides."""
    store = SettingsStore()

    if parsed_args.settingsFile:
        InstallerLogger.start("Loading Settings")
        missing = SettingsFileHandler(store).load_from_file(parsed_args.settingsFile)
        InstallerLogger.end(
            "Loading Settings",
            InstallerResult.SUCCESS,
            f"{parsed_args.settingsFile} ({len(missing)} setting(s) left at defaults)",
        )

    if parsed_args.installDir:
        store.set_value(KEY_SETTING_INSTALL_DIR, parsed_args.installDir)

    for override in parsed_args.settingOverrides:
        key, sep, value = override.partition("=")
        if not sep:
            raise ConfigValueValidationError(override, override, "expected KEY=VALUE")
        store.set_value(key.strip(), value.strip())

    return store


def run_installation(controller: InstallationController) -> int:
    try:
        effective = controller.effective_configuration()
        InstallerLogger.info("Configuration summary:")
        for line in format_configuration_summary(effective):
            InstallerLogger.info(f"  {line}")
        run = controller.start()
    except ValidationError as e:
        InstallerLogger.error(format_validation_summary(e.issues))
        return EXIT_INVALID_SETTINGS
    if run is None:
        return EXIT_FAILED

    controller.wait()
    run = controller.current_run()
    for line in build_run_summary_lines(run):
        print(line)
    return EXIT_OK if run.status == RunStatus.SUCCEEDED else EXIT_FAILED


def run_cli():
    parser = argparse.ArgumentParser(
        description="Velociraptor DFIR server installer",
        add_help=True,
        usage=f"{SCRIPT_NAME} <arguments>",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VELOSETUP_VERSION}")
    build_arg_parser(parser)
    parsed_args = parser.parse_args()

    configure_logging(parsed_args)
    InstallerLogger.debug(f"Arguments: {parsed_args}")

    if parsed_args.purge and not parsed_args.uninstall:
        parser.error("--purge is only valid with --uninstall")

    try:
        store = load_settings(parsed_args)
    except (FileOperationError, ConfigItemNotFoundError, ConfigValueValidationError) as e:
        InstallerLogger.error(f"Invalid settings: {e}")
        sys.exit(EXIT_INVALID_SETTINGS)

    if parsed_args.exportSettingsFile is not None:
        handler = SettingsFileHandler(store)
        export_file = parsed_args.exportSettingsFile or handler.generate_default_export_filename()
        try:
            handler.save_to_file(export_file)
        except FileOperationError as e:
            InstallerLogger.error(str(e))
            sys.exit(EXIT_FAILED)
        InstallerLogger.info(f"Settings exported to {export_file}")
        sys.exit(EXIT_OK)

    if parsed_args.validateOnly:
        if issues := validate_settings(store):
            InstallerLogger.error(format_validation_summary(issues))
            sys.exit(EXIT_INVALID_SETTINGS)
        for line in format_configuration_summary(derive(store, validate=False)):
            print(line)
        InstallerLogger.info("Settings are valid")
        sys.exit(EXIT_OK)

    try:
        InstallerLogger.start("Spawning Platform-specific Installer")
        controller = InstallationController(
            store,
            reachability_timeout=(
                parsed_args.reachabilityTimeout
                if parsed_args.reachabilityTimeout is not None
                else REACHABILITY_TIMEOUT_SECONDS
            ),
            debug=parsed_args.debug,
        )
        InstallerLogger.end(
            "Spawning Platform-specific Installer",
            InstallerResult.SUCCESS,
            type(controller.platform).__name__,
        )
    except NotImplementedError as e:
        InstallerLogger.end("Spawning Platform-specific Installer", InstallerResult.FAILURE, str(e))
        sys.exit(EXIT_FAILED)

    if parsed_args.status:
        status = controller.status()
        InstallerLogger.info(f"Velociraptor: {status.describe()}")
        sys.exit(EXIT_OK if status.healthy else EXIT_FAILED)

    if parsed_args.health:
        report = controller.health()
        for line in report.format_lines():
            print(line)
        sys.exit(EXIT_FAILED if report.overall == OverallHealth.UNHEALTHY else EXIT_OK)

    if parsed_args.stop:
        controller.stop()
        sys.exit(EXIT_OK)

    if parsed_args.uninstall:
        sys.exit(EXIT_OK if controller.uninstall(purge=parsed_args.purge) else EXIT_FAILED)

    sys.exit(run_installation(controller))


def main():
    try:
        run_cli()
    except KeyboardInterrupt:
        InstallerLogger.error("Installation cancelled by user.")
        sys.exit(EXIT_FAILED)
    except Exception as e:
        import traceback

        tb = traceback.format_exc()
        InstallerLogger.error(f"Error executing main(): {e}\n{tb}")
        sys.exit(EXIT_FAILED)


if __name__ == "__main__":
    main()
