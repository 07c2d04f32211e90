#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Run the installation pipeline off the interactive thread.

At most one run is active at a time. Step transitions and the finished run
are handed back to the host thread through a queue; the host either calls
pump() itself or passes a tk-style scheduler (anything with after(ms, fn))
so pumping happens automatically.
"""

import copy
import queue
import threading

from typing import Callable, Optional

from velosetup.installer.configs.constants.constants import ASYNC_PUMP_INTERVAL_MS
from velosetup.installer.core.effective_config import EffectiveConfiguration
from velosetup.installer.core.install_run import InstallationRun, StepResult
from velosetup.installer.utils.logger_utils import InstallerLogger

_STEP = "step"
_DONE = "done"


class AsyncRunner:
    def __init__(
        self,
        pipeline,
        scheduler=None,
        on_step: Optional[Callable[[StepResult], None]] = None,
        on_complete: Optional[Callable[[InstallationRun], None]] = None,
    ):
        self.pipeline = pipeline
        self.scheduler = scheduler
        self.on_step = on_step
        self.on_complete = on_complete
        self._lock = threading.Lock()
        self._events: "queue.Queue" = queue.Queue()
        self._thread: Optional[threading.Thread] = None
        self._current: Optional[InstallationRun] = None

    @property
    def current_run(self) -> Optional[InstallationRun]:
        return self._current

    def is_running(self) -> bool:
        return self._lock.locked()

    def trigger(self, effective: EffectiveConfiguration) -> Optional[InstallationRun]:
        """Start a run unless one is already active; returns the new (Pending) run or None."""
        if not self._lock.acquire(blocking=False):
            InstallerLogger.warning("An installation is already running; ignoring the new request")
            return None

        try:
            run = self.pipeline.new_run(effective)
            self._current = run
            self._thread = threading.Thread(
                target=self._work,
                args=(effective, run),
                name=f"velosetup-install-{run.id[:8]}",
                daemon=True,
            )
            self._thread.start()
        except Exception:
            self._lock.release()
            raise

        if self.scheduler is not None:
            self.scheduler.after(ASYNC_PUMP_INTERVAL_MS, self._scheduled_pump)
        return run

    def _work(self, effective: EffectiveConfiguration, run: InstallationRun):
        try:
            self.pipeline.run(effective, run=run, on_step=self._queue_step)
        except Exception as e:
            InstallerLogger.error(f"Installation {run.id} aborted: {e}")
            if not run.status.is_terminal():
                run.finish(False)
        finally:
            self._events.put((_DONE, run))
            self._lock.release()

    def _queue_step(self, step: StepResult):
        # snapshot; the live result keeps changing on the worker thread
        self._events.put((_STEP, copy.copy(step)))

    def pump(self) -> bool:
        """Deliver queued events to the callbacks; returns True once the run has completed."""
        completed = False
        while True:
            try:
                kind, payload = self._events.get_nowait()
            except queue.Empty:
                break
            try:
                if kind == _STEP and self.on_step:
                    self.on_step(payload)
                elif kind == _DONE:
                    completed = True
                    if self.on_complete:
                        self.on_complete(payload)
            except Exception as e:
                InstallerLogger.error(f"Error in installation callback: {e}")
        return completed

    def _scheduled_pump(self):
        if not self.pump():
            self.scheduler.after(ASYNC_PUMP_INTERVAL_MS, self._scheduled_pump)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Join the worker thread; returns True if it has finished."""
        thread = self._thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()
