"""
Unit tests for the RAPPOR parameter set and width lookup.
"""
# 说明：Params 参数对象与 hash_part_width 查表函数的单元测试。
# 覆盖：
# - 受支持位宽到切片位数的映射以及不受支持位宽返回 -1
# - 非法概率、哈希个数与位宽在构造时抛出 ParamValidationError
# - 不受支持但为正的位宽（如 24）允许构造，由编码器锁存为无效
# - to_dict / from_dict 的往返一致性

import dataclasses

import pytest

from rappor.params import SUPPORTED_WIDTHS, UNSUPPORTED_WIDTH, Params, hash_part_width, is_supported_width
from rappor.utils.param_validation import ParamValidationError


@pytest.mark.parametrize("width,expected", [(8, 3), (16, 4), (32, 5), (64, 6), (128, 7)])
def test_hash_part_width_supported(width, expected) -> None:
    # 验证受支持位宽的切片位数等于 log2(位宽)
    assert hash_part_width(width) == expected
    assert 1 << expected == width


@pytest.mark.parametrize("width", [0, 1, 7, 12, 24, 48, 96, 256, -8])
def test_hash_part_width_unsupported(width) -> None:
    # 验证不受支持的位宽返回 -1 且不抛异常
    assert hash_part_width(width) == UNSUPPORTED_WIDTH
    assert not is_supported_width(width)


def test_supported_widths_are_byte_multiples() -> None:
    assert all(width % 8 == 0 for width in SUPPORTED_WIDTHS)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"prob_f": -0.1},
        {"prob_p": 1.5},
        {"prob_q": 2.0},
        {"num_hashes": 0},
        {"num_bits": 0},
        {"num_bits": 8.0},
        {"num_hashes": True},
    ],
)
def test_params_rejects_invalid_values(kwargs) -> None:
    # 验证概率越界、哈希个数或位宽非法时在构造阶段报错
    with pytest.raises(ParamValidationError):
        Params(**kwargs)


def test_params_accepts_unsupported_positive_width() -> None:
    # 不受支持的位宽属于配置错误，不在 Params 构造阶段拒绝
    params = Params(num_bits=24, num_hashes=1)
    assert params.num_bytes == 3


def test_params_is_frozen() -> None:
    params = Params()
    with pytest.raises(dataclasses.FrozenInstanceError):
        params.num_bits = 32  # type: ignore[misc]


def test_params_dict_roundtrip() -> None:
    # 验证 to_dict/from_dict 能还原同一组参数，缺省键使用默认值
    params = Params(num_bits=32, num_hashes=3, prob_f=0.1, prob_p=0.2, prob_q=0.9)
    assert Params.from_dict(params.to_dict()) == params
    assert Params.from_dict({"num_bits": 64}) == Params(num_bits=64)
