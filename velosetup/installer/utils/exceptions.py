#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Custom exceptions for the Velociraptor installer."""

from typing import Any, List, Optional


class VeloSetupError(Exception):
    """Base class for installer errors."""

    pass


class ConfigItemNotFoundError(VeloSetupError):
    """Raised when a settings item is not found."""

    def __init__(self, key: str):
        super().__init__(f"Settings item '{key}' not found.")
        self.key = key


class ConfigValueValidationError(VeloSetupError):
    """Raised when a settings value fails its type check."""

    def __init__(self, key: str, value: Any, message: str):
        super().__init__(f"Invalid value for '{key}': {message} (value was '{value}').")
        self.key = key
        self.value = value


class FileOperationError(VeloSetupError):
    """Raised for errors during file operations (load/save)."""

    pass


class ValidationError(VeloSetupError):
    """Raised when user-fixable settings problems prevent a run from starting."""

    def __init__(self, issues: List[Any]):
        self.issues = list(issues)
        details = "; ".join(f"{i.label}: {i.message}" for i in self.issues)
        super().__init__(f"{len(self.issues)} validation issue(s): {details}")


class FatalStepError(VeloSetupError):
    """Raised by an installation step when the run cannot continue."""

    def __init__(self, message: str, remediation: Optional[str] = None):
        super().__init__(message)
        self.remediation = remediation


class DegradedStepWarning(VeloSetupError):
    """Raised by a non-fatal step that completed in a degraded way or failed recoverably."""

    pass


class ReachabilityTimeout(FatalStepError):
    """The deployed service did not become reachable within the allotted time."""

    pass


class ConfigPatchError(FatalStepError):
    """A mandatory section of the configuration file could not be located or written."""

    pass


class ReleaseDiscoveryError(FatalStepError):
    """No suitable release asset could be located or downloaded."""

    pass
