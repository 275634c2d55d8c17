"""Link functions applied to model scores, including sigmoid approximations."""

from __future__ import annotations

import enum
import math
import struct

from servingkit.errors import ErrorCode, ServingError, enforce


class LinkFunctionType(enum.Enum):
    """Supported link functions."""

    LF_EXP = enum.auto()
    LF_RECIPROCAL = enum.auto()
    LF_IDENTITY = enum.auto()
    LF_SIGMOID_RAW = enum.auto()
    LF_SIGMOID_MM1 = enum.auto()
    LF_SIGMOID_MM3 = enum.auto()
    LF_SIGMOID_GA = enum.auto()
    LF_SIGMOID_T1 = enum.auto()
    LF_SIGMOID_T3 = enum.auto()
    LF_SIGMOID_T5 = enum.auto()
    LF_SIGMOID_T7 = enum.auto()
    LF_SIGMOID_T9 = enum.auto()
    LF_SIGMOID_LS7 = enum.auto()
    LF_SIGMOID_SEG3 = enum.auto()
    LF_SIGMOID_SEG5 = enum.auto()
    LF_SIGMOID_DF = enum.auto()
    LF_SIGMOID_SR = enum.auto()
    LF_SIGMOID_SEGLS = enum.auto()


class AlgorithmType(enum.Enum):
    """Kind of model output."""

    REGRESSION = enum.auto()
    CLASSIFICATION = enum.auto()


def _f32(value: float) -> float:
    """Round a value to single precision, as single-precision constants are."""
    return struct.unpack("f", struct.pack("f", value))[0]


_MM3_A = _f32(0.197)
_MM3_B = _f32(0.004)
_GA_A = _f32(0.15012)
_GA_B = _f32(0.001593)
_T3 = _f32(1.0 / 48)
_T5 = _f32(1.0 / 480)
_T7 = _f32(17.0 / 80640)
_T9 = _f32(31.0 / 1451520)


def parse_link_func_type(name: str) -> LinkFunctionType:
    """Return the link function type with the given name."""
    member = LinkFunctionType.__members__.get(name)
    enforce(
        member is not None,
        ErrorCode.UNEXPECTED_ERROR,
        f"unsupported link func type:{name}",
    )
    return member  # type: ignore[return-value]


def _exp(x: float) -> float:
    try:
        return math.exp(x)
    except OverflowError:
        return math.inf


def _t1_sig(x: float, limit: bool = True) -> float:
    ret = 0.5 + 0.25 * x
    if limit:
        ret = min(max(ret, 0.0), 1.0)
    return ret


def _t3_sig(x: float, limit: bool = True) -> float:
    ret = _t1_sig(x, False) - x**3 * _T3
    if limit:
        if x < -2:
            return 0.0
        if x > 2:
            return 1.0
    return ret


def _sr_sig(x: float) -> float:
    return 0.5 * (x / math.sqrt(1.0 + x**2)) + 0.5


def _ls7(x: float) -> float:
    return (
        5.00052959e-01
        + 2.35176260e-01 * x
        - 3.97212202e-05 * x**2
        - 1.23407424e-02 * x**3
        + 4.04588962e-06 * x**4
        + 3.94330487e-04 * x**5
        - 9.74060972e-08 * x**6
        - 4.74674505e-06 * x**7
    )


def _seg5(x: float) -> float:
    if x > 35.75:
        return 1.0
    if x > 3.75:
        return 0.965087890625 + x * 0.0009765625
    if x >= -3.75:
        return 0.5 + 0.125 * x
    if x >= -35.75:
        return 0.034912109375 + x * 0.0009765625
    return 0.0


def _t7_poly(x: float) -> float:
    return 0.5 + 0.25 * x - _T3 * x**3 + _T5 * x**5 - _T7 * x**7


_FUNCS = {
    LinkFunctionType.LF_EXP: _exp,
    LinkFunctionType.LF_RECIPROCAL: lambda x: (
        1.0 / x if x != 0 else math.copysign(math.inf, x)
    ),
    LinkFunctionType.LF_IDENTITY: lambda x: x,
    LinkFunctionType.LF_SIGMOID_RAW: lambda x: 1.0 / (1.0 + _exp(-x)),
    LinkFunctionType.LF_SIGMOID_MM1: lambda x: 0.5 + 0.125 * x,
    LinkFunctionType.LF_SIGMOID_MM3: lambda x: 0.5 + _MM3_A * x - _MM3_B * x**3,
    LinkFunctionType.LF_SIGMOID_GA: lambda x: 0.5 + _GA_A * x + _GA_B * x**3,
    LinkFunctionType.LF_SIGMOID_T1: _t1_sig,
    LinkFunctionType.LF_SIGMOID_T3: _t3_sig,
    LinkFunctionType.LF_SIGMOID_T5: lambda x: min(
        max(_t3_sig(x, False) + x**5 * _T5, 0.0), 1.0
    ),
    LinkFunctionType.LF_SIGMOID_T7: _t7_poly,
    LinkFunctionType.LF_SIGMOID_T9: lambda x: _t7_poly(x) + _T9 * x**9,
    LinkFunctionType.LF_SIGMOID_LS7: _ls7,
    LinkFunctionType.LF_SIGMOID_SEG3: lambda x: (
        1.0 if x > 4 else 0.0 if x < -4 else 0.5 + 0.125 * x
    ),
    LinkFunctionType.LF_SIGMOID_SEG5: _seg5,
    LinkFunctionType.LF_SIGMOID_DF: lambda x: 0.5 * (x / (1.0 + abs(x))) + 0.5,
    LinkFunctionType.LF_SIGMOID_SR: _sr_sig,
    LinkFunctionType.LF_SIGMOID_SEGLS: lambda x: (
        _ls7(x) if abs(x) <= 5.87 else _sr_sig(x)
    ),
}


def apply_link_func(x: float, lf_type: LinkFunctionType) -> float:
    """Apply the link function ``lf_type`` to ``x``."""
    func = _FUNCS.get(lf_type) if isinstance(lf_type, LinkFunctionType) else None
    if func is None:
        raise ServingError(
            ErrorCode.UNEXPECTED_ERROR, f"unsupported link func type {lf_type}"
        )
    return float(func(float(x)))