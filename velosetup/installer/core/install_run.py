#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""State of one triggered installation and of each of its steps."""

import uuid

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from velosetup.installer.configs.constants.constants import FATAL_STEPS
from velosetup.installer.configs.constants.enums import RunStatus, StepName, StepStatus
from velosetup.installer.core.effective_config import EffectiveConfiguration


@dataclass
class StepResult:
    name: StepName
    fatal: bool
    status: StepStatus = StepStatus.NOT_STARTED
    retryable: bool = False
    message: str = ""
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @classmethod
    def for_step(cls, name: StepName) -> "StepResult":
        return cls(name=name, fatal=name in FATAL_STEPS)

    def mark_running(self):
        self.status = StepStatus.RUNNING
        self.started_at = datetime.now()

    def mark_succeeded(self, message: str = ""):
        self.status = StepStatus.SUCCEEDED
        self.message = message
        self.finished_at = datetime.now()

    def mark_failed(self, message: str):
        self.status = StepStatus.FAILED
        # only non-fatal steps can be retried without restarting the run
        self.retryable = not self.fatal
        self.message = message
        self.finished_at = datetime.now()

    @property
    def succeeded(self) -> bool:
        return self.status == StepStatus.SUCCEEDED

    @property
    def failed(self) -> bool:
        return self.status == StepStatus.FAILED

    def describe(self) -> str:
        status = self.status.value
        if self.failed:
            status += " (retryable)" if self.retryable else " (fatal)"
        return f"{self.name.value}: {status}" + (f" - {self.message}" if self.message else "")


@dataclass
class InstallationRun:
    effective: EffectiveConfiguration
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    status: RunStatus = RunStatus.PENDING
    steps: List[StepResult] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.now)
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    def mark_running(self):
        self.status = RunStatus.RUNNING
        self.started_at = datetime.now()

    def finish(self, succeeded: bool):
        self.status = RunStatus.SUCCEEDED if succeeded else RunStatus.FAILED
        self.finished_at = datetime.now()

    def add_warning(self, message: str):
        self.warnings.append(message)

    def get_step(self, name: StepName) -> Optional[StepResult]:
        return next((s for s in self.steps if s.name == name), None)

    @property
    def failed_step(self) -> Optional[StepResult]:
        return next((s for s in self.steps if s.failed and s.fatal), None)

    @property
    def is_running(self) -> bool:
        return self.status == RunStatus.RUNNING
