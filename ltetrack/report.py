"""Text tables and CSV export of the per-RNTI tracking databases."""

from __future__ import annotations

import math
from os import PathLike
from typing import Iterable, Mapping

from ltetrack.types import (
    NOF_MCS,
    DLTable,
    DLTrackingEntry,
    ULModulation,
    ULTrackingEntry,
)

BOLDGREEN = "\033[1m\033[32m"
RED = "\033[31m"
RESET = "\033[0m"

UL_RULE = "-" * 86
DL_RULE = "-" * 104
ALL_DL_RULE = "-" * 109

_UL_KNOWN = (
    (ULModulation.QAM16_MAX, "16QAM"),
    (ULModulation.QAM64_MAX, "64QAM"),
    (ULModulation.QAM256_MAX, "256QAM"),
)
_DL_KNOWN = (
    (DLTable.TABLE_64QAM, "64QAM"),
    (DLTable.TABLE_256QAM, "256QAM"),
)
_TABLE_NAMES = {
    DLTable.TABLE_64QAM: "64QAM",
    DLTable.TABLE_256QAM: "256QAM",
    DLTable.UNKNOWN: "Unknown",
}


def _cells(*pairs: tuple[object, int]) -> str:
    return "".join(str(value).ljust(width) for value, width in pairs)


def _g(value: float) -> str:
    return f"{value:.3g}"


def _percent(numerator: int, denominator: int) -> int:
    if denominator <= 0:
        return 0
    return math.floor(numerator / denominator * 100 + 0.5)


def _ta_cell(ta: float) -> str:
    if ta >= 0:
        return "+" + _g(ta).ljust(17)
    return _g(ta).ljust(18)


def _success_cell(entry, gate: int) -> str:
    percent = _percent(entry.nof_success_mgs, entry.nof_active) if gate > 0 else 0
    text = f"{entry.nof_success_mgs}({percent}%)"
    return BOLDGREEN + text.ljust(13) + RESET


# --- uplink -------------------------------------------------------------


def _ul_groups(entries: Mapping[int, ULTrackingEntry]):
    items = sorted(entries.items())
    known = [
        (label, [(r, e) for r, e in items if e.mcs_mod is mod and e.nof_active > 0])
        for mod, label in _UL_KNOWN
    ]
    unknown = [(r, e) for r, e in items if e.mcs_mod is ULModulation.UNKNOWN and e.nof_active > 0]
    clean = [(r, e) for r, e in unknown if not e.has_mimo_errors]
    noisy = [(r, e) for r, e in unknown if e.has_mimo_errors]
    return known, clean, noisy


def _ul_header() -> str:
    return _cells(
        ("Num", 5), ("RNTI", 9), ("Max Mod", 12), ("Active", 9), ("Success", 9),
        ("SNR(dB)", 9), ("DL-UL_delay(us)", 18), ("Other_Info", 9),
    )


def _ul_row(num: int, rnti: int, label: str, entry: ULTrackingEntry) -> str:
    return (
        _cells(
            (num, 5), (rnti, 9), (label, 12), (entry.nof_active, 9),
            (entry.nof_success_mgs, 9), (_g(entry.average_snr), 9),
        )
        + _ta_cell(entry.average_ta)
        + str(entry.nof_other_mimo).ljust(9)
    )


def _all_ul_header(num_label: str) -> str:
    return (
        _cells(("Num" if num_label == "Num" else num_label, 5), ("RNTI", 9), ("Max Mod", 12), ("Active", 9))
        + BOLDGREEN + "Success".ljust(13) + RESET
        + _cells(("SNR(dB)", 9), ("DL-UL_delay(us)", 18), ("Other_Info", 9))
    )


def _all_ul_row(num: int, rnti: int, label: str, entry: ULTrackingEntry, gate: int) -> str:
    return (
        _cells((num, 5), (rnti, 9), (label, 12), (entry.nof_active, 9))
        + _success_cell(entry, gate)
        + str(_g(entry.average_snr)).ljust(9)
        + _ta_cell(entry.average_ta)
        + str(entry.nof_other_mimo).ljust(9)
    )


def _ul_summary(counts: list[int], unknown: int, table_word: str) -> str:
    q16, q64, q256 = counts
    return (
        f"[256Tracking] Total: {q16} RNTIs are max 16QAM{table_word}, "
        f"{q64} RNTIs are max 64QAM table, {q256} RNTIs are max 256QAM, "
        f"{unknown} RNTIs are Unknown \n\n"
    )


def format_ul_database(entries: Mapping[int, ULTrackingEntry]) -> str:
    """Render the short-lived uplink tracking database as a text table."""
    known, clean, noisy = _ul_groups(entries)
    lines = [UL_RULE, _ul_header(), UL_RULE]
    num = 1
    counts = []
    for label, group in known:
        for rnti, entry in group:
            lines.append(_ul_row(num, rnti, label, entry))
            num += 1
        counts.append(len(group))
    lines += [UL_RULE, _ul_header()]
    for rnti, entry in clean:
        lines.append(_ul_row(num, rnti, "Unknown", entry))
        num += 1
    lines.append(UL_RULE)
    for rnti, entry in noisy:
        lines.append(_ul_row(num, rnti, "Unknown", entry))
        num += 1
    return "\n".join(lines) + "\n" + _ul_summary(counts, len(clean) + len(noisy), "")


def format_all_ul_database(entries: Mapping[int, ULTrackingEntry]) -> str:
    """Render the uplink archive as a text table with success percentages."""
    known, clean, noisy = _ul_groups(entries)
    lines = [UL_RULE, _all_ul_header("Num"), UL_RULE]
    num = 1
    counts = []
    for label, group in known:
        for rnti, entry in group:
            lines.append(_all_ul_row(num, rnti, label, entry, entry.nof_active))
            num += 1
        counts.append(len(group))
    lines += [UL_RULE, _all_ul_header("Num ")]
    for rnti, entry in clean:
        lines.append(_all_ul_row(num, rnti, "Unknown", entry, entry.nof_active))
        num += 1
    lines.append(UL_RULE)
    for rnti, entry in noisy:
        lines.append(_all_ul_row(num, rnti, "Unknown", entry, entry.nof_newtx))
        num += 1
    return "\n".join(lines) + "\n" + _ul_summary(counts, len(clean) + len(noisy), " table")


# --- downlink -----------------------------------------------------------


def _dl_groups(entries: Mapping[int, DLTrackingEntry]):
    items = sorted(entries.items())
    known = [
        (label, [(r, e) for r, e in items if e.mcs_table is table])
        for table, label in _DL_KNOWN
    ]
    unknown = [(r, e) for r, e in items if e.mcs_table is DLTable.UNKNOWN and e.nof_active > 0]
    clean = [(r, e) for r, e in unknown if not e.has_mimo_errors]
    noisy = [(r, e) for r, e in unknown if e.has_mimo_errors]
    return known, clean, noisy


def _dl_header() -> str:
    return _cells(
        ("Num", 5), ("RNTI", 9), ("Table", 12), ("Active", 9), ("New TX", 9),
        ("ReTX", 9), ("Success", 9), ("HARQ", 9), ("Normal", 9), ("W_MIMO", 9),
        ("W_pinfor", 9), ("Other ", 9),
    )


def _dl_row(num: int, rnti: int, label: str, entry: DLTrackingEntry) -> str:
    return _cells(
        (num, 5), (rnti, 9), (label, 12), (entry.nof_active, 9), (entry.nof_newtx, 9),
        (entry.nof_retx, 9), (entry.nof_success_mgs, 9), (entry.nof_success_retx_harq, 9),
        (entry.nof_success_retx_nom, 9), (entry.nof_unsupport_mimo, 9),
        (entry.nof_pinfo, 9), (entry.nof_other_mimo, 9),
    )


def _all_dl_header(num_label: str, other_label: str) -> str:
    return (
        _cells((num_label, 5), ("RNTI", 9), ("Table", 12), ("Active", 9))
        + RED + "New TX".ljust(9) + RESET
        + "ReTX".ljust(9)
        + BOLDGREEN + "Success".ljust(13) + RESET
        + _cells(("HARQ", 9), ("Normal", 9), ("W_MIMO", 9), ("W_pinfor", 9), (other_label, 9))
    )


def _all_dl_row(num: int, rnti: int, label: str, entry: DLTrackingEntry) -> str:
    return (
        _cells((num, 5), (rnti, 9), (label, 12), (entry.nof_active, 9))
        + RED + str(entry.nof_newtx).ljust(9) + RESET
        + str(entry.nof_retx).ljust(9)
        + _success_cell(entry, entry.nof_newtx)
        + _cells(
            (entry.nof_success_retx_harq, 9), (entry.nof_success_retx_nom, 9),
            (entry.nof_unsupport_mimo, 9), (entry.nof_pinfo, 9), (entry.nof_other_mimo, 9),
        )
    )


def _dl_summary(q64: int, q256: int, unknown: int) -> str:
    return (
        f"[256Tracking] Total: {q64} RNTIs are 64QAM table, {q256} RNTIs are 256QAM table, "
        f"{unknown} RNTIs are Unknown \n\n"
    )


def format_dl_database(entries: Mapping[int, DLTrackingEntry]) -> str:
    """Render the short-lived downlink tracking database as a text table."""
    known, clean, noisy = _dl_groups(entries)
    lines = [DL_RULE, _dl_header(), DL_RULE]
    num = 1
    for label, group in known:
        for rnti, entry in group:
            lines.append(_dl_row(num, rnti, label, entry))
            num += 1
    lines += [DL_RULE, _dl_header()]
    for rnti, entry in clean:
        lines.append(_dl_row(num, rnti, "Unknown", entry))
        num += 1
    lines.append(DL_RULE)
    for rnti, entry in noisy:
        lines.append(_dl_row(num, rnti, "Unknown", entry))
        num += 1
    summary = _dl_summary(len(known[0][1]), len(known[1][1]), len(clean) + len(noisy))
    return "\n".join(lines) + "\n" + summary


def format_all_dl_database(entries: Mapping[int, DLTrackingEntry]) -> str:
    """Render the downlink archive as a text table with success percentages."""
    known, clean, noisy = _dl_groups(entries)
    lines = [ALL_DL_RULE, _all_dl_header("Num", "Other "), ALL_DL_RULE]
    num = 1
    for label, group in known:
        for rnti, entry in group:
            lines.append(_all_dl_row(num, rnti, label, entry))
            num += 1
    lines += [ALL_DL_RULE, _all_dl_header("Num ", "Other")]
    for rnti, entry in clean:
        lines.append(_all_dl_row(num, rnti, "Unknown", entry))
        num += 1
    lines.append(ALL_DL_RULE)
    for rnti, entry in noisy:
        lines.append(_all_dl_row(num, rnti, "Unknown", entry))
        num += 1
    summary = _dl_summary(len(known[0][1]), len(known[1][1]), len(clean) + len(noisy))
    return "\n".join(lines) + "\n" + summary


# --- CSV ----------------------------------------------------------------


def csv_header() -> str:
    """Header line of the per-RNTI MCS statistics CSV file."""
    return "RNTI, table, total,success,percent," + "".join(f"{i}," for i in range(NOF_MCS))


def csv_row(rnti: int, entry: DLTrackingEntry) -> str:
    """One CSV line with the success statistics of ``rnti`` per MCS index."""
    table = _TABLE_NAMES.get(entry.mcs_table, "")
    percent = _percent(entry.nof_success_mgs, entry.nof_newtx)
    cells = [str(rnti), table, str(entry.nof_newtx), str(entry.nof_success_mgs), str(percent)]
    for total, success in zip(entry.mcs, entry.mcs_sc):
        cells.append(f"{success}/{total}={_percent(success, total)}%")
    return ",".join(cells) + ","


def _csv_selection(entries: Mapping[int, DLTrackingEntry]) -> Iterable[tuple[int, DLTrackingEntry]]:
    known, clean, _ = _dl_groups(entries)
    for _, group in known:
        yield from group
    yield from clean


def write_csv(entries: Mapping[int, DLTrackingEntry], path: str | PathLike[str]) -> int:
    """Write the downlink archive to ``path`` and return the number of rows."""
    rows = [csv_row(rnti, entry) for rnti, entry in _csv_selection(entries)]
    with open(path, "w", encoding="utf-8", newline="") as handle:
        handle.write(csv_header() + "\n")
        for row in rows:
            handle.write(row + "\n")
    return len(rows)