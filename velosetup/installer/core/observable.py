#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

from typing import Any, Callable

# observers registered under this key are called for every change
OBSERVE_ALL_KEYS = "*"


class ObservableStoreMixin:
    """Mixin providing observer registration utilities for stores.

    Expects subclass to define a dict attribute `_observers: dict[str, list[Callable]]`.
    """

    def observe(self, key: str, callback: Callable[..., None]) -> None:
        if key not in self._observers:
            self._observers[key] = []
        if callback not in self._observers[key]:
            self._observers[key].append(callback)

    def unobserve(self, key: str, callback: Callable[..., None]) -> None:
        if key in self._observers and callback in self._observers[key]:
            self._observers[key].remove(callback)
            if not self._observers[key]:
                del self._observers[key]

    def _notify_observers(self, key: str, value: Any) -> None:
        """Notify observers for *key* with the new value, then wildcard observers with (key, value)."""
        for callback in list(self._observers.get(key, [])):
            callback(value)
        for callback in list(self._observers.get(OBSERVE_ALL_KEYS, [])):
            callback(key, value)
