#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""
Base Controller for the Velociraptor installer front ends
=========================================================

This module provides the base class for controllers. A controller owns the
SettingsStore (the model) and pushes state to whatever view a front end
attaches; views are duck-typed and every view method is optional.
"""

from typing import Any, Tuple

from velosetup.installer.core.settings_store import SettingsStore
from velosetup.installer.utils.exceptions import ConfigItemNotFoundError, ConfigValueValidationError
from velosetup.installer.utils.logger_utils import InstallerLogger


class BaseController:
    """
    Base class for all Controllers in MVC architecture.

    This class serves as the base for all Controller classes, providing
    common functionality for managing the Model and View.
    """

    def __init__(self, model: SettingsStore):
        """
        Initialize with a reference to the model.

        Args:
            model: The SettingsStore instance
        """
        self.model = model
        self.view = None

    def set_view(self, view):
        """
        Set the view this controller will manage.

        Args:
            view: The view instance to manage
        """
        self.view = view
        self.refresh_view()

    def refresh_view(self):
        """
        Refresh the view with current model data.

        Subclasses override this to update specific view elements.
        """
        pass

    def _call_view(self, method: str, *args):
        if self.view is not None and hasattr(self.view, method):
            try:
                getattr(self.view, method)(*args)
            except Exception as e:
                InstallerLogger.error(f"Error updating view ({method}): {e}")

    def validate(self) -> Tuple[bool, str]:
        """
        Validate all settings managed by this controller.

        Returns:
            tuple: (success, error_message)
        """
        return True, ""

    def update_setting(self, key: str, value: Any) -> Tuple[bool, str]:
        """
        Set a single setting in the model.

        Returns:
            tuple: (success, error_message)
        """
        try:
            self.model.set_value(key, value)
        except (ConfigItemNotFoundError, ConfigValueValidationError) as e:
            InstallerLogger.warning(str(e))
            return False, str(e)
        return True, ""

    def load_from_model(self):
        """
        Load data from the model and update the view.

        Call this when new data is loaded into the model from an external
        source (like a settings file).
        """
        self.refresh_view()
