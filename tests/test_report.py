import pytest

from ltetrack.report import (
    ALL_DL_RULE,
    BOLDGREEN,
    DL_RULE,
    RED,
    RESET,
    UL_RULE,
    csv_header,
    csv_row,
    format_all_dl_database,
    format_all_ul_database,
    format_dl_database,
    format_ul_database,
    write_csv,
)
from ltetrack.types import NOF_MCS, DLTable, DLTrackingEntry, ULModulation, ULTrackingEntry


def ul(mod, active, success=0, snr=(), ta=(), other=0):
    return ULTrackingEntry(
        mcs_mod=mod,
        nof_active=active,
        nof_success_mgs=success,
        snr=list(snr),
        ta=list(ta),
        nof_other_mimo=other,
    )


def dl(table, active, newtx=0, success=0, mimo=0):
    return DLTrackingEntry(
        mcs_table=table,
        nof_active=active,
        nof_newtx=newtx,
        nof_success_mgs=success,
        nof_unsupport_mimo=mimo,
    )


def line_of(text, rnti):
    return next(i for i, line in enumerate(text.splitlines()) if f" {rnti} " in f" {line} " and line[5:].startswith(str(rnti)))


def test_ul_database_rules_and_header():
    out = format_ul_database({})
    lines = out.splitlines()
    assert lines[0] == UL_RULE
    assert len(UL_RULE) == 86
    assert lines[1].startswith("Num  RNTI     Max Mod")
    assert "Total: 0 RNTIs are max 16QAM, 0 RNTIs are max 64QAM table" in out


def test_ul_database_orders_by_modulation_then_rnti():
    entries = {
        10: ul(ULModulation.QAM256_MAX, 2),
        20: ul(ULModulation.QAM16_MAX, 2),
        5: ul(ULModulation.QAM64_MAX, 2),
        30: ul(ULModulation.QAM16_MAX, 1),
    }
    out = format_ul_database(entries)
    assert line_of(out, 20) < line_of(out, 30) < line_of(out, 5) < line_of(out, 10)
    assert "Total: 2 RNTIs are max 16QAM, 1 RNTIs are max 64QAM table, 1 RNTIs are max 256QAM, 0 RNTIs are Unknown \n\n" in out


def test_ul_database_skips_inactive_and_numbers_rows():
    entries = {
        7: ul(ULModulation.QAM16_MAX, 0),
        8: ul(ULModulation.QAM16_MAX, 3),
    }
    out = format_ul_database(entries)
    rows = [line for line in out.splitlines() if line.startswith("1    ")]
    assert len(rows) == 1
    assert rows[0].startswith("1".ljust(5) + "8".ljust(9) + "16QAM".ljust(12))
    assert "7".ljust(9) + "16QAM" not in out


def test_ul_database_unknown_split_by_errors():
    entries = {
        100: ul(ULModulation.UNKNOWN, 3, other=2),
        200: ul(ULModulation.UNKNOWN, 3),
    }
    out = format_ul_database(entries)
    lines = out.splitlines()
    clean = line_of(out, 200)
    noisy = line_of(out, 100)
    assert clean < noisy
    assert lines[clean].startswith("1    ")
    assert lines[noisy].startswith("2    ")
    assert UL_RULE in lines[clean:noisy]


def test_ul_ta_sign_column():
    entries = {
        1: ul(ULModulation.QAM16_MAX, 1, ta=[2.0]),
        2: ul(ULModulation.QAM64_MAX, 1, ta=[-2.0]),
    }
    lines = format_ul_database(entries).splitlines()
    pos = lines[line_of("\n".join(lines), 1)]
    neg = lines[line_of("\n".join(lines), 2)]
    assert "+2" in pos
    assert "-2" in neg and "+" not in neg


def test_all_ul_success_percentage_colored():
    entries = {42: ul(ULModulation.QAM256_MAX, 4, success=3, snr=[10.0, 20.0])}
    out = format_all_ul_database(entries)
    assert BOLDGREEN + "3(75%)".ljust(13) + RESET in out
    assert "Total: 0 RNTIs are max 16QAM table" in out
    assert "1 RNTIs are max 256QAM" in out


def test_dl_database_rule_and_counts():
    entries = {
        3: dl(DLTable.TABLE_64QAM, 5),
        4: dl(DLTable.TABLE_256QAM, 5),
        9: dl(DLTable.UNKNOWN, 0),
        11: dl(DLTable.UNKNOWN, 2, mimo=1),
    }
    out = format_dl_database(entries)
    assert out.splitlines()[0] == DL_RULE
    assert len(DL_RULE) == 104
    assert "[256Tracking] Total: 1 RNTIs are 64QAM table, 1 RNTIs are 256QAM table, 1 RNTIs are Unknown \n\n" in out
    assert line_of(out, 3) < line_of(out, 4) < line_of(out, 11)


def test_dl_row_columns():
    entries = {61: dl(DLTable.TABLE_64QAM, 5, newtx=4, success=2)}
    row = format_dl_database(entries).splitlines()[3]
    expected_start = "1".ljust(5) + "61".ljust(9) + "64QAM".ljust(12) + "5".ljust(9) + "4".ljust(9)
    assert row.startswith(expected_start)


def test_all_dl_colors_and_rule():
    entries = {61: dl(DLTable.TABLE_256QAM, 4, newtx=4, success=2)}
    out = format_all_dl_database(entries)
    assert out.splitlines()[0] == ALL_DL_RULE
    assert len(ALL_DL_RULE) == 109
    assert RED + "4".ljust(9) + RESET in out
    assert BOLDGREEN + "2(50%)".ljust(13) + RESET in out


def test_all_dl_percent_zero_without_newtx():
    entries = {61: dl(DLTable.TABLE_64QAM, 4, newtx=0, success=2)}
    out = format_all_dl_database(entries)
    assert BOLDGREEN + "2(0%)".ljust(13) + RESET in out


def test_csv_header_columns():
    header = csv_header()
    assert header.startswith("RNTI, table, total,success,percent,")
    cells = header.split(",")
    assert cells[5:5 + NOF_MCS] == [str(i) for i in range(NOF_MCS)]
    assert header.endswith(f"{NOF_MCS - 1},")


def test_csv_row_fields():
    entry = dl(DLTable.TABLE_256QAM, 4, newtx=4, success=3)
    entry.mcs[5] = 2
    entry.mcs_sc[5] = 1
    cells = csv_row(77, entry).split(",")
    assert cells[:4] == ["77", "256QAM", "4", "3"]
    assert cells[4] == "75"
    assert cells[5 + 5] == "1/2=50%"
    assert cells[5] == "0/0=0%"
    assert len(cells) == 5 + NOF_MCS + 1
    assert cells[-1] == ""


@pytest.mark.parametrize(
    "table, label",
    [(DLTable.TABLE_64QAM, "64QAM"), (DLTable.TABLE_256QAM, "256QAM"), (DLTable.UNKNOWN, "Unknown")],
)
def test_csv_row_table_label(table, label):
    assert csv_row(1, dl(table, 1, newtx=1)).split(",")[1] == label


def test_write_csv_selects_rows(tmp_path):
    entries = {
        1: dl(DLTable.TABLE_64QAM, 2, newtx=2, success=2),
        2: dl(DLTable.TABLE_256QAM, 2, newtx=2, success=1),
        3: dl(DLTable.UNKNOWN, 2, newtx=2),
        4: dl(DLTable.UNKNOWN, 2, newtx=2, mimo=1),
    }
    path = tmp_path / "stats.csv"
    count = write_csv(entries, path)
    lines = path.read_text(encoding="utf-8").splitlines()
    assert count == 3
    assert lines[0] == csv_header()
    assert [line.split(",")[0] for line in lines[1:]] == ["1", "2", "3"]
    assert lines[1] == csv_row(1, entries[1])


def test_write_csv_empty(tmp_path):
    path = tmp_path / "empty.csv"
    assert write_csv({}, path) == 0
    assert path.read_text(encoding="utf-8") == csv_header() + "\n"