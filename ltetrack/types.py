"""Shared data types for per-RNTI modulation and MCS table tracking."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from statistics import fmean
from typing import Sequence

NOF_MCS = 32
"""Number of MCS indices for which per-index statistics are kept."""


class ULModulation(enum.Enum):
    """Highest uplink modulation a UE has been seen to use."""

    UNKNOWN = enum.auto()
    QAM16_MAX = enum.auto()
    QAM64_MAX = enum.auto()
    QAM256_MAX = enum.auto()
    FULL_BUFFER = enum.auto()


class DLTable(enum.Enum):
    """Downlink MCS table in use by a UE."""

    TABLE_64QAM = enum.auto()
    TABLE_256QAM = enum.auto()
    UNKNOWN = enum.auto()
    FULL_BUFFER = enum.auto()


class TransmissionType(enum.Enum):
    """How a transport block relates to the HARQ process."""

    NEW_TX = enum.auto()
    RE_TX = enum.auto()
    DECODED = enum.auto()
    HARQ_FULL_BUFFER = enum.auto()
    HARQ_BUSY = enum.auto()


class MimoResult(enum.Enum):
    """Outcome of the MIMO configuration check for a PDSCH."""

    SUCCESS = enum.auto()
    NOT_SUPPORT = enum.auto()
    PMI_WRONG = enum.auto()
    LAYER_WRONG = enum.auto()


class CqiType(enum.Enum):
    """Aperiodic CQI report type."""

    WIDEBAND = enum.auto()
    SUBBAND_UE = enum.auto()
    SUBBAND_HL = enum.auto()


@dataclass
class UCIOffsets:
    """Beta offset indices for UCI multiplexed on PUSCH."""

    ack: int = 0
    cqi: int = 0
    ri: int = 0


@dataclass
class UESpecConfig:
    """UE-specific configuration learned from RRC signalling."""

    p_a: float = 0.0
    uci_config: UCIOffsets = field(default_factory=UCIOffsets)
    cqi_type: CqiType = CqiType.SUBBAND_HL
    has_ue_config: bool = False


def default_ue_config() -> UESpecConfig:
    """Return the configuration assumed for a UE before its RRC setup is seen."""
    return UESpecConfig(
        p_a=0.0,
        uci_config=UCIOffsets(ack=10, cqi=8, ri=11),
        cqi_type=CqiType.SUBBAND_HL,
        has_ue_config=False,
    )


@dataclass
class TransportBlock:
    """One codeword of a downlink grant as seen by the statistics."""

    enabled: bool = False
    mcs_idx: int = 0
    transmission_type: TransmissionType = TransmissionType.NEW_TX
    success: bool = False


def mean_or_zero(values: Sequence[float]) -> float:
    """Arithmetic mean of ``values``, or 0.0 when there are none."""
    return fmean(values) if values else 0.0


_SUMMED_COUNTERS = (
    "nof_active",
    "nof_newtx",
    "nof_success_mgs",
    "nof_retx",
    "nof_success_retx_nom",
    "nof_success_retx_harq",
    "nof_success_retx",
    "nof_unsupport_mimo",
)


def _zero_mcs() -> list[int]:
    return [0] * NOF_MCS


@dataclass
class _TrackingEntry:
    time: float = 0.0
    nof_active: int = 0
    nof_newtx: int = 0
    nof_success_mgs: int = 0
    nof_retx: int = 0
    nof_success_retx_nom: int = 0
    nof_success_retx_harq: int = 0
    nof_success_retx: int = 0
    nof_unsupport_mimo: int = 0
    nof_pinfo: int = 0
    nof_other_mimo: int = 0
    mcs: list[int] = field(default_factory=_zero_mcs)
    mcs_sc: list[int] = field(default_factory=_zero_mcs)
    to_all_database: bool = True
    ue_config: UESpecConfig = field(default_factory=default_ue_config)

    @property
    def has_mimo_errors(self) -> bool:
        """True if any MIMO, precoding or layer mismatch was recorded."""
        return self.nof_unsupport_mimo > 0 or self.nof_pinfo > 0 or self.nof_other_mimo > 0

    @property
    def wrong_detection(self) -> bool:
        """True if the RNTI looks like a false DCI detection."""
        return self.nof_active == 0 or (
            self.nof_active <= 10 and self.nof_success_mgs == 0 and self.has_mimo_errors
        )

    def _merge_counters(self, other: _TrackingEntry) -> None:
        for name in _SUMMED_COUNTERS:
            setattr(self, name, getattr(self, name) + getattr(other, name))
        self.mcs = [a + b for a, b in zip(self.mcs, other.mcs)]
        self.mcs_sc = [a + b for a, b in zip(self.mcs_sc, other.mcs_sc)]


@dataclass
class ULTrackingEntry(_TrackingEntry):
    """Statistics for one RNTI in uplink sniffing mode."""

    mcs_mod: ULModulation = ULModulation.UNKNOWN
    snr: list[float] = field(default_factory=list)
    ta: list[float] = field(default_factory=list)

    @property
    def average_snr(self) -> float:
        return mean_or_zero(self.snr)

    @property
    def average_ta(self) -> float:
        return mean_or_zero(self.ta)

    def merge(self, other: ULTrackingEntry) -> None:
        """Accumulate ``other`` into this entry; SNR and TA add one averaged sample each."""
        self._merge_counters(other)
        self.snr.append(other.average_snr)
        self.ta.append(other.average_ta)


@dataclass
class DLTrackingEntry(_TrackingEntry):
    """Statistics for one RNTI in downlink sniffing mode."""

    mcs_table: DLTable = DLTable.UNKNOWN
    has_rar: bool = False
    nof_msg_after_rar: int = 0

    def merge(self, other: DLTrackingEntry) -> None:
        """Accumulate the counters and per-MCS statistics of ``other``."""
        self._merge_counters(other)