"""Per-RNTI tracking of the downlink MCS table in use."""

from __future__ import annotations

import copy
import threading
import time
from typing import Callable, Iterable

from ltetrack.types import (
    NOF_MCS,
    DLTable,
    DLTrackingEntry,
    MimoResult,
    TransmissionType,
    TransportBlock,
    UESpecConfig,
    default_ue_config,
)
from ltetrack.ul_tracking import DEFAULT_INTERVAL, DEFAULT_MAX_SIZE

DEFAULT_RAR_THRESHOLD = 3
"""Messages after a random access response before a table is trusted again."""

FORMAT_1A = 2
"""Ordinal of DCI format 1A (0 = format 0, 1 = format 1, 2 = format 1A, ...)."""

LOW_SUCCESS_RATE = 0.15
"""Below this decoding success rate the learned table is discarded."""

_NEW_TX_TYPES = (
    TransmissionType.NEW_TX,
    TransmissionType.HARQ_FULL_BUFFER,
    TransmissionType.HARQ_BUSY,
)
_RETX_TYPES = (TransmissionType.RE_TX, TransmissionType.DECODED)
_KNOWN_TABLES = (DLTable.TABLE_64QAM, DLTable.TABLE_256QAM)


def _count_mimo(entry: DLTrackingEntry, block: TransportBlock, mimo_ret: MimoResult) -> None:
    if not block.enabled:
        return
    if mimo_ret is MimoResult.NOT_SUPPORT:
        entry.nof_unsupport_mimo += 1
    elif mimo_ret is MimoResult.PMI_WRONG:
        entry.nof_pinfo += 1
    elif mimo_ret is MimoResult.LAYER_WRONG:
        entry.nof_other_mimo += 1


class DLTracker:
    """Short-lived tracking database of downlink RNTIs plus a long-lived archive."""

    def __init__(
        self,
        harq_mode: bool = False,
        interval: float = DEFAULT_INTERVAL,
        max_size: int = DEFAULT_MAX_SIZE,
        rar_threshold: int = DEFAULT_RAR_THRESHOLD,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.harq_mode = harq_mode
        self.interval = interval
        self.max_size = max_size
        self.rar_threshold = rar_threshold
        self._clock = clock if clock is not None else time.monotonic
        self._lock = threading.Lock()
        self.tracking: dict[int, DLTrackingEntry] = {}
        self.all_database: dict[int, DLTrackingEntry] = {}
        self.default_ue_config: UESpecConfig = default_ue_config()

    def _add(self, rnti: int, table: DLTable) -> DLTrackingEntry:
        config = copy.deepcopy(self.default_ue_config)
        config.has_ue_config = False
        entry = DLTrackingEntry(time=self._clock(), mcs_table=table, ue_config=config)
        self.tracking.setdefault(rnti, entry)
        return self.tracking[rnti]

    def _archive(self, rnti: int, entry: DLTrackingEntry) -> None:
        archived = self.all_database.get(rnti)
        if archived is not None:
            archived.merge(entry)
        else:
            self.all_database[rnti] = copy.deepcopy(entry)

    def find(self, rnti: int) -> DLTable:
        """Return the known table of ``rnti`` and refresh its timestamp.

        Unknown RNTIs give ``UNKNOWN`` while there is room in the database and
        ``FULL_BUFFER`` once it holds ``max_size`` entries.
        """
        with self._lock:
            entry = self.tracking.get(rnti)
            if entry is None:
                if len(self.tracking) < self.max_size:
                    return DLTable.UNKNOWN
                return DLTable.FULL_BUFFER
            entry.time = self._clock()
            return entry.mcs_table

    def update_rnti(self, rnti: int, table: DLTable) -> None:
        """Set the table of a tracked RNTI; an untracked one is added as unknown.

        After a random access response the table stays unknown until more than
        ``rar_threshold`` messages have been seen.
        """
        with self._lock:
            entry = self.tracking.get(rnti)
            if entry is None:
                self._add(rnti, DLTable.UNKNOWN)
                return
            if entry.has_rar:
                if entry.nof_msg_after_rar > self.rar_threshold:
                    entry.mcs_table = table
                    entry.has_rar = False
                else:
                    entry.mcs_table = DLTable.UNKNOWN
            else:
                entry.mcs_table = table

    def update_rar_time_crnti(self, crnti: int) -> None:
        """Mark ``crnti`` as freshly assigned by a random access response."""
        with self._lock:
            entry = self.tracking.get(crnti)
            if entry is None:
                entry = self._add(crnti, DLTable.UNKNOWN)
            entry.has_rar = True
            entry.mcs_table = DLTable.UNKNOWN

    def update_database(self) -> None:
        """Drop stale or falsely detected RNTIs, archiving the genuine ones.

        RNTIs that stay but decode less than 15 % of their messages lose their
        learned table.
        """
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
                    continue
                success_rate = entry.nof_success_mgs / entry.nof_active
                if success_rate < LOW_SUCCESS_RATE and entry.mcs_table is not DLTable.UNKNOWN:
                    entry.mcs_table = DLTable.UNKNOWN
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
        transport_blocks: Iterable[TransportBlock],
        dci_format: int,
        mcs_table: DLTable,
        mimo_ret: MimoResult,
    ) -> None:
        """Record the outcome of one PDSCH for ``rnti``.

        ``dci_format`` is the ordinal of the DCI format that scheduled it and
        ``mcs_table`` the table it was decoded with.
        """
        blocks = list(transport_blocks)
        with self._lock:
            entry = self.tracking.get(rnti)
            if entry is None:
                entry = self._add(rnti, DLTable.UNKNOWN)

            if dci_format > FORMAT_1A and entry.has_rar:
                entry.nof_msg_after_rar += 1

            if mcs_table in _KNOWN_TABLES:
                for block in blocks:
                    self._count_known_table(entry, block, mcs_table, mimo_ret)
            elif mcs_table is DLTable.UNKNOWN:
                for block in blocks:
                    if block.enabled:
                        entry.nof_active += 1
                        entry.nof_newtx += 1
                    if block.success:
                        entry.nof_success_mgs += 1
                    _count_mimo(entry, block, mimo_ret)

            for block in blocks:
                if block.enabled and 0 <= block.mcs_idx < NOF_MCS:
                    entry.mcs[block.mcs_idx] += 1
                    if block.success or block.transmission_type is TransmissionType.DECODED:
                        entry.mcs_sc[block.mcs_idx] += 1

    def _count_known_table(
        self,
        entry: DLTrackingEntry,
        block: TransportBlock,
        table: DLTable,
        mimo_ret: MimoResult,
    ) -> None:
        kind = block.transmission_type
        is_64 = table is DLTable.TABLE_64QAM
        is_256 = table is DLTable.TABLE_256QAM
        if block.enabled:
            entry.nof_active += 1
        if block.enabled and kind in _NEW_TX_TYPES:
            if not self.harq_mode:
                entry.nof_newtx += 1
            elif (block.mcs_idx <= 28 and is_64) or (block.mcs_idx <= 27 and is_256):
                entry.nof_newtx += 1
        elif block.enabled and (
            kind in _RETX_TYPES
            or (block.mcs_idx > 28 and is_64)
            or (block.mcs_idx > 27 and is_256)
        ):
            entry.nof_retx += 1

        if block.success:
            entry.nof_success_mgs += 1
            if kind is TransmissionType.RE_TX:
                entry.nof_success_retx_harq += 1
        if kind is TransmissionType.DECODED and not block.success:
            entry.nof_success_mgs += 1
        if (block.success and kind is TransmissionType.RE_TX) or kind is TransmissionType.DECODED:
            entry.nof_success_retx += 1
        if kind is TransmissionType.DECODED:
            entry.nof_success_retx_nom += 1
        _count_mimo(entry, block, mimo_ret)

    def update_ue_config(self, rnti: int, config: UESpecConfig) -> None:
        """Store the UE-specific configuration of ``rnti``, tracking it if needed."""
        with self._lock:
            entry = self.tracking.get(rnti)
            if entry is None:
                entry = self._add(rnti, DLTable.UNKNOWN)
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