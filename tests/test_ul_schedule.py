import pytest

from ltetrack.ul_schedule import (
    NOF_TTI,
    DmrsConfig,
    PrachConfig,
    SIB2Params,
    ULSchedule,
    rar_ul_tti,
    ul_tti,
)


def test_ul_tti_offsets():
    assert ul_tti(100) == 96
    assert rar_ul_tti(100) == 94


def test_tti_wraps_around():
    assert ul_tti(0) == NOF_TTI - 4
    assert rar_ul_tti(0) == NOF_TTI - 6


@pytest.mark.parametrize("tti", [0, 3, 5, 4000, NOF_TTI - 1])
def test_tti_results_stay_in_range(tti):
    assert 0 <= ul_tti(tti) < NOF_TTI
    assert 0 <= rar_ul_tti(tti) < NOF_TTI


def test_push_then_get_four_subframes_later():
    schedule = ULSchedule()
    schedule.push(200, ["a", "b"])
    assert schedule.get(204) == ["a", "b"]
    assert schedule.get(200) is None


def test_push_appends_to_existing():
    schedule = ULSchedule()
    schedule.push(200, ["a"])
    schedule.push(200, ["b"])
    assert schedule.get(204) == ["a", "b"]


def test_push_does_not_alias_caller_list():
    schedule = ULSchedule()
    grants = ["a"]
    schedule.push(200, grants)
    grants.append("b")
    assert schedule.get(204) == ["a"]


def test_push_rar_keeps_first_and_delays_six():
    schedule = ULSchedule()
    schedule.push_rar(300, ["first"])
    schedule.push_rar(300, ["second"])
    assert schedule.get_rar(306) == ["first"]
    assert schedule.get(304) is None


def test_delete_removes_grants():
    schedule = ULSchedule()
    schedule.push(10, ["x"])
    schedule.push_rar(10, ["y"])
    schedule.delete(14)
    schedule.delete_rar(16)
    assert schedule.get(14) is None
    assert schedule.get_rar(16) is None


def test_delete_missing_is_harmless():
    schedule = ULSchedule()
    schedule.push(10, ["x"])
    schedule.delete(99)
    assert schedule.get(14) == ["x"]


def test_wrapping_lookup():
    schedule = ULSchedule()
    schedule.push(NOF_TTI - 2, ["late"])
    assert schedule.get(2) == ["late"]


def test_configure_derives_dmrs_and_prach():
    schedule = ULSchedule(rnti=1234)
    assert not schedule.configured
    sib2 = SIB2Params(
        cyclic_shift=3,
        group_hopping_enabled=True,
        sequence_hopping_enabled=False,
        group_assign_pusch=7,
        root_seq_idx=22,
        prach_config_idx=4,
        high_speed_flag=True,
        zero_correlation_zone=12,
        prach_freq_offset=2,
    )
    schedule.configure(sib2)
    assert schedule.configured
    assert schedule.sib2 is sib2
    assert schedule.dmrs == DmrsConfig(
        cyclic_shift=3, group_hopping_en=True, sequence_hopping_en=False, delta_ss=7
    )
    assert schedule.prach == PrachConfig(
        is_nr=False, root_seq_idx=22, config_idx=4, hs_flag=True, zero_corr_zone=12, freq_offset=2
    )