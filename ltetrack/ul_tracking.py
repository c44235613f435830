"""Per-RNTI tracking of the highest uplink modulation in use."""

from __future__ import annotations

import copy
import threading
import time
from typing import Callable

from ltetrack.types import (
    ULModulation,
    ULTrackingEntry,
    UESpecConfig,
    default_ue_config,
)

DEFAULT_INTERVAL = 10.0
DEFAULT_MAX_SIZE = 1000


class ULTracker:
    """Short-lived tracking database of uplink RNTIs plus a long-lived archive.

    Entries that have been idle for longer than ``interval`` seconds, or that
    look like false detections, are dropped from the tracking database by
    :meth:`update_database`; genuine ones are folded into ``all_database``.
    """

    def __init__(
        self,
        interval: float = DEFAULT_INTERVAL,
        max_size: int = DEFAULT_MAX_SIZE,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.interval = interval
        self.max_size = max_size
        self._clock = clock if clock is not None else time.monotonic
        self._lock = threading.Lock()
        self.tracking: dict[int, ULTrackingEntry] = {}
        self.all_database: dict[int, ULTrackingEntry] = {}
        self.default_ue_config: UESpecConfig = default_ue_config()
        self.nof_api_msg = 0

    def _add(self, rnti: int, modulation: ULModulation) -> ULTrackingEntry:
        config = copy.deepcopy(self.default_ue_config)
        config.has_ue_config = False
        entry = ULTrackingEntry(time=self._clock(), mcs_mod=modulation, ue_config=config)
        self.tracking.setdefault(rnti, entry)
        return self.tracking[rnti]

    def _archive(self, rnti: int, entry: ULTrackingEntry) -> None:
        archived = self.all_database.get(rnti)
        if archived is not None:
            archived.merge(entry)
        else:
            self.all_database[rnti] = copy.deepcopy(entry)

    def find(self, rnti: int) -> ULModulation:
        """Return the known modulation of ``rnti`` and refresh its timestamp.

        Unknown RNTIs give ``UNKNOWN`` while there is room in the database and
        ``FULL_BUFFER`` once it holds ``max_size`` entries.
        """
        with self._lock:
            entry = self.tracking.get(rnti)
            if entry is None:
                if len(self.tracking) < self.max_size:
                    return ULModulation.UNKNOWN
                return ULModulation.FULL_BUFFER
            entry.time = self._clock()
            return entry.mcs_mod

    def update_rnti(self, rnti: int, modulation: ULModulation) -> None:
        """Set the modulation of a tracked RNTI; an untracked one is added as unknown."""
        with self._lock:
            entry = self.tracking.get(rnti)
            if entry is not None:
                entry.mcs_mod = modulation
            else:
                self._add(rnti, ULModulation.UNKNOWN)

    def update_database(self) -> None:
        """Drop stale or falsely detected RNTIs, archiving the genuine ones."""
        with self._lock:
            now = self._clock()
            expired = []
            for rnti, entry in self.tracking.items():
                elapsed = int(now - entry.time)
                wrong = entry.wrong_detection
                if wrong:
                    entry.to_all_database = False
                if elapsed > self.interval or wrong or entry.nof_active == 0:
                    expired.append(rnti)
            for rnti in expired:
                entry = self.tracking.pop(rnti)
                if entry.to_all_database:
                    self._archive(rnti, entry)

    def merge_all_database(self) -> None:
        """Fold every tracked RNTI into the archive without removing it."""
        with self._lock:
            for rnti, entry in self.tracking.items():
                self._archive(rnti, entry)

    def update_statistic(
        self,
        rnti: int,
        success: bool,
        modulation: ULModulation,
        snr: float,
        ta: float,
    ) -> None:
        """Record one decoded PUSCH for ``rnti``."""
        with self._lock:
            entry = self.tracking.get(rnti)
            if entry is None:
                entry = self._add(rnti, modulation)
            entry.nof_active += 1
            if success:
                entry.nof_success_mgs += 1
            entry.snr.append(snr)
            entry.ta.append(ta)

    def update_ue_config(self, rnti: int, config: UESpecConfig) -> None:
        """Store the UE-specific configuration of ``rnti``, tracking it if needed."""
        with self._lock:
            entry = self.tracking.get(rnti)
            if entry is None:
                entry = self._add(rnti, ULModulation.UNKNOWN)
            entry.ue_config = config

    def get_ue_config(self, rnti: int) -> UESpecConfig:
        """Return the configuration of ``rnti`` or the default one if it is untracked."""
        with self._lock:
            entry = self.tracking.get(rnti)
            if entry is not None:
                return entry.ue_config
            config = copy.deepcopy(self.default_ue_config)
            config.has_ue_config = False
            return config

    def set_default_ue_config(self, config: UESpecConfig) -> None:
        """Replace the configuration assumed for newly seen RNTIs."""
        with self._lock:
            self.default_ue_config = config

    def increase_nof_api_msg(self) -> None:
        """Count one identity-revealing message found on the uplink."""
        with self._lock:
            self.nof_api_msg += 1