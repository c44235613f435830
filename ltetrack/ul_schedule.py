"""Uplink grants waiting for the subframe in which their PUSCH arrives."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Iterable

NOF_TTI = 10240
"""Number of TTIs before the system frame number wraps."""

UL_DELAY = 4
"""Subframes between a DCI 0 grant and its PUSCH."""

RAR_UL_DELAY = 6
"""Subframes between a random access response grant and its PUSCH."""


def ul_tti(tti: int) -> int:
    """TTI at which the grant for a PUSCH received in ``tti`` was sent."""
    return (tti - UL_DELAY) % NOF_TTI


def rar_ul_tti(tti: int) -> int:
    """TTI at which the RAR grant for a PUSCH received in ``tti`` was sent."""
    return (tti - RAR_UL_DELAY) % NOF_TTI


@dataclass
class SIB2Params:
    """The parts of SIB2 needed to receive PUSCH and PRACH."""

    cyclic_shift: int = 0
    group_hopping_enabled: bool = False
    sequence_hopping_enabled: bool = False
    group_assign_pusch: int = 0
    root_seq_idx: int = 0
    prach_config_idx: int = 0
    high_speed_flag: bool = False
    zero_correlation_zone: int = 0
    prach_freq_offset: int = 0
    pusch_hop_offset: int = 0
    n_sb: int = 1


@dataclass
class DmrsConfig:
    """PUSCH demodulation reference signal configuration."""

    cyclic_shift: int = 0
    group_hopping_en: bool = False
    sequence_hopping_en: bool = False
    delta_ss: int = 0


@dataclass
class PrachConfig:
    """Random access channel configuration."""

    is_nr: bool = False
    root_seq_idx: int = 0
    config_idx: int = 0
    hs_flag: bool = False
    zero_corr_zone: int = 0
    freq_offset: int = 0


class ULSchedule:
    """Keeps uplink grants by the TTI they were sent in, until decoded."""

    def __init__(self, rnti: int = 0, en_debug: bool = False) -> None:
        self.rnti = rnti
        self.en_debug = en_debug
        self._lock = threading.Lock()
        self._grants: dict[int, list[Any]] = {}
        self._rar_grants: dict[int, list[Any]] = {}
        self.sib2: SIB2Params | None = None
        self.dmrs = DmrsConfig()
        self.prach = PrachConfig()
        self.configured = False

    def push(self, tti: int, grants: Iterable[Any]) -> None:
        """Add DCI 0 grants sent in ``tti``, after any already stored there."""
        with self._lock:
            self._grants.setdefault(tti, []).extend(grants)

    def push_rar(self, tti: int, grants: Iterable[Any]) -> None:
        """Store RAR grants sent in ``tti``; grants already stored there are kept."""
        with self._lock:
            self._rar_grants.setdefault(tti, list(grants))

    def get(self, tti: int) -> list[Any] | None:
        """DCI 0 grants whose PUSCH is due in ``tti``, or None."""
        with self._lock:
            return self._grants.get(ul_tti(tti))

    def get_rar(self, tti: int) -> list[Any] | None:
        """RAR grants whose PUSCH is due in ``tti``, or None."""
        with self._lock:
            return self._rar_grants.get(rar_ul_tti(tti))

    def delete(self, tti: int) -> None:
        """Forget the DCI 0 grants whose PUSCH was due in ``tti``."""
        with self._lock:
            self._grants.pop(ul_tti(tti), None)

    def delete_rar(self, tti: int) -> None:
        """Forget the RAR grants whose PUSCH was due in ``tti``."""
        with self._lock:
            self._rar_grants.pop(rar_ul_tti(tti), None)

    def configure(self, sib2: SIB2Params) -> None:
        """Derive the DMRS and PRACH configuration from SIB2."""
        with self._lock:
            self.sib2 = sib2
            self.dmrs = DmrsConfig(
                cyclic_shift=sib2.cyclic_shift,
                group_hopping_en=sib2.group_hopping_enabled,
                sequence_hopping_en=sib2.sequence_hopping_enabled,
                delta_ss=sib2.group_assign_pusch,
            )
            self.prach = PrachConfig(
                is_nr=False,
                root_seq_idx=sib2.root_seq_idx,
                config_idx=sib2.prach_config_idx,
                hs_flag=sib2.high_speed_flag,
                zero_corr_zone=sib2.zero_correlation_zone,
                freq_offset=sib2.prach_freq_offset,
            )
            self.configured = True