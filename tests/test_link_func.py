import math

import pytest

from servingkit.errors import ErrorCode, ServingError
from servingkit.link_func import (
    LinkFunctionType,
    apply_link_func,
    parse_link_func_type,
)

SIGMOIDS = [t for t in LinkFunctionType if t.name.startswith("LF_SIGMOID")]

SYMMETRIC = [
    LinkFunctionType.LF_SIGMOID_RAW,
    LinkFunctionType.LF_SIGMOID_MM1,
    LinkFunctionType.LF_SIGMOID_MM3,
    LinkFunctionType.LF_SIGMOID_GA,
    LinkFunctionType.LF_SIGMOID_T1,
    LinkFunctionType.LF_SIGMOID_T3,
    LinkFunctionType.LF_SIGMOID_T7,
    LinkFunctionType.LF_SIGMOID_T9,
    LinkFunctionType.LF_SIGMOID_SEG3,
    LinkFunctionType.LF_SIGMOID_SEG5,
    LinkFunctionType.LF_SIGMOID_DF,
    LinkFunctionType.LF_SIGMOID_SR,
]

CLAMPED = [
    LinkFunctionType.LF_SIGMOID_T1,
    LinkFunctionType.LF_SIGMOID_T3,
    LinkFunctionType.LF_SIGMOID_T5,
    LinkFunctionType.LF_SIGMOID_SEG3,
    LinkFunctionType.LF_SIGMOID_SEG5,
]


@pytest.mark.parametrize("lf_type", list(LinkFunctionType))
def test_parse_round_trip(lf_type):
    assert parse_link_func_type(lf_type.name) is lf_type


def test_parse_unknown_name_raises():
    with pytest.raises(ServingError) as info:
        parse_link_func_type("LF_NOT_A_FUNC")
    assert info.value.code is ErrorCode.UNEXPECTED_ERROR


def test_apply_rejects_non_member():
    with pytest.raises(ServingError) as info:
        apply_link_func(1.0, "LF_EXP")
    assert info.value.code is ErrorCode.UNEXPECTED_ERROR


@pytest.mark.parametrize("x", [-3.5, 0.0, 2.25])
def test_identity_returns_input(x):
    assert apply_link_func(x, LinkFunctionType.LF_IDENTITY) == x


@pytest.mark.parametrize("x", [0.5, 2.0, 7.0])
def test_exp_inverts_log(x):
    assert apply_link_func(math.log(x), LinkFunctionType.LF_EXP) == pytest.approx(x)


@pytest.mark.parametrize("x", [0.5, 4.0, -8.0])
def test_reciprocal_times_input_is_one(x):
    assert apply_link_func(x, LinkFunctionType.LF_RECIPROCAL) * x == pytest.approx(1.0)


def test_reciprocal_of_zero_is_infinite():
    assert apply_link_func(0.0, LinkFunctionType.LF_RECIPROCAL) == math.inf


@pytest.mark.parametrize("lf_type", SIGMOIDS)
def test_sigmoids_are_half_at_zero(lf_type):
    assert apply_link_func(0.0, lf_type) == pytest.approx(0.5, abs=1e-4)


@pytest.mark.parametrize("lf_type", SYMMETRIC)
@pytest.mark.parametrize("x", [0.3, 1.7, 10.0])
def test_symmetric_sigmoids(lf_type, x):
    total = apply_link_func(x, lf_type) + apply_link_func(-x, lf_type)
    assert total == pytest.approx(1.0)


@pytest.mark.parametrize("lf_type", CLAMPED)
@pytest.mark.parametrize("x", [-100.0, -3.0, 0.7, 3.0, 100.0])
def test_clamped_sigmoids_stay_in_unit_interval(lf_type, x):
    assert 0.0 <= apply_link_func(x, lf_type) <= 1.0


@pytest.mark.parametrize(
    "lf_type",
    [
        LinkFunctionType.LF_SIGMOID_SEG3,
        LinkFunctionType.LF_SIGMOID_SEG5,
        LinkFunctionType.LF_SIGMOID_T3,
    ],
)
def test_segment_saturation(lf_type):
    assert apply_link_func(50.0, lf_type) == 1
    assert apply_link_func(-50.0, lf_type) == 0


def test_seg5_middle_segment_matches_mm1():
    for x in (-3.0, 0.5, 3.75):
        assert apply_link_func(x, LinkFunctionType.LF_SIGMOID_SEG5) == apply_link_func(
            x, LinkFunctionType.LF_SIGMOID_MM1
        )


def test_segls_switches_between_ls7_and_sr():
    near = 2.0
    far = 8.0
    assert apply_link_func(near, LinkFunctionType.LF_SIGMOID_SEGLS) == apply_link_func(
        near, LinkFunctionType.LF_SIGMOID_LS7
    )
    assert apply_link_func(far, LinkFunctionType.LF_SIGMOID_SEGLS) == apply_link_func(
        far, LinkFunctionType.LF_SIGMOID_SR
    )


def test_raw_sigmoid_is_monotone_and_handles_extremes():
    values = [
        apply_link_func(x, LinkFunctionType.LF_SIGMOID_RAW)
        for x in (-1000.0, -2.0, 0.0, 2.0, 1000.0)
    ]
    assert values == sorted(values)
    assert values[0] == 0.0
    assert values[-1] == 1.0


def test_t9_extends_t7_with_positive_term():
    x = 1.5
    assert apply_link_func(x, LinkFunctionType.LF_SIGMOID_T9) > apply_link_func(
        x, LinkFunctionType.LF_SIGMOID_T7
    )