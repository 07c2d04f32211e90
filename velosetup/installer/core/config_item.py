#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.


"""Base settings item class for the Velociraptor installer.

This module provides the ConfigItem class that serves as the foundation
for every installer setting held by the SettingsStore.
"""

from dataclasses import dataclass, field, InitVar
from typing import Any, Callable, Optional, Tuple, Union


@dataclass
class ConfigItem:
    """
    Base class for all settings items.

    This class represents a single configurable value with all its associated data/metadata.

    Attributes:
        key: Unique conceptual identifier for the item (should always be a KEY_SETTING_... constant)
        label: Human-readable display name for the item
        default_value: Initial/fallback value for the item
        value: Current value
        is_modified: Whether the item has been modified via set_value
        validator: Callback to check if incoming value is of the right type
        choices: List of choices for the item (used by front ends)
        is_password: Whether the field should be displayed as sensitive
        accept_blank: Whether the field should accept a blank/empty value
        _question: Question attached to this ConfigItem to present to the user (either a str or "Callable")
    """

    key: str
    label: str
    default_value: Any = None
    value: Any = field(init=False)
    validator: Optional[Callable[[Any], Tuple[bool, str]]] = None
    choices: list = field(default_factory=list)
    is_modified: bool = False
    is_password: bool = False
    accept_blank: bool = False
    metadata: dict = field(default_factory=dict)

    # Use InitVar to accept `question` in __init__ but store internally as _question
    question: InitVar[Union[str, Callable[[], Any]]] = ""
    _question: Union[str, Callable[[], Any]] = field(init=False)

    def __post_init__(self, question):
        self.value = self.default_value
        self.is_modified = False
        self._question = question

    def _validate(self, value: Any) -> Tuple[bool, str]:
        if not self.validator:
            return True, ""
        result = self.validator(value)
        # Handle different validator return types
        if isinstance(result, tuple):
            return result
        return bool(result), ("" if result else "Invalid value")

    def set_value(self, value: Any) -> Tuple[bool, str]:
        """Set and validate a new value.

        Args:
            value: The new value to set

        Returns:
            Tuple of (success, error_message)
        """
        valid, error = self._validate(value)
        if not valid:
            return False, error

        # set to true even if the value is the same as the default value; an explicit choice is kept
        self.is_modified = True
        self.value = value
        return True, ""

    def get_value(self) -> Any:
        """Get the current value. Default is returned if value is None."""
        if self.value is None:
            return self.default_value
        return self.value

    def reset(self):
        """Reset value to default."""
        self.value = self.default_value
        self.is_modified = False

    @property
    def question(self) -> str:  # noqa: F811
        result = self._question() if callable(self._question) else self._question
        return "" if result is None else str(result)

    @question.setter
    def question(self, value: Union[str, Callable[[], Any]]):
        self._question = value


class ListOfStringsConfigItem(ConfigItem):
    """Custom ConfigItem that converts comma-separated strings to lists of strings"""

    def set_value(self, value: Any) -> Tuple[bool, str]:
        """Set and validate a new value, with automatic string-to-list conversion."""

        if isinstance(value, str):
            converted_value = [s.strip() for s in value.split(",") if s.strip()]
        elif isinstance(value, (tuple, set, frozenset)):
            converted_value = list(value)
        else:
            converted_value = value

        return super().set_value(converted_value)
