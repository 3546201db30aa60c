"""Bit vector helpers: masks, biased random bits and little-endian packing."""
# 说明：为编码流水线提供定宽比特向量的构造、随机采样、序列化与诊断渲染工具。
# 职责：
# - 以 Python int 表示比特向量，提供掩码、置位与计数操作
# - randbits：按给定概率独立采样每一位，供各随机源生成 f/p/q/uniform 掩码
# - to_bytes/from_bytes：借助 bitarray 的 little 端序完成 "低位字节在前" 的打包与还原
# - bit_string/bit_indices：调试日志与测试中使用的可读形式

from __future__ import annotations

from typing import List

import numpy as np
from bitarray import bitarray
from bitarray.util import ba2int, int2ba

from rappor.types import BitVector
from rappor.utils.param_validation import ParamValidationError


def bit_mask(num_bits: int) -> BitVector:
    """All-ones vector of width num_bits."""
    if num_bits < 0:
        raise ParamValidationError("num_bits must be non-negative")
    return (1 << num_bits) - 1


def set_bit(bits: BitVector, index: int) -> BitVector:
    return bits | (1 << index)


def _as_bitarray(bits: BitVector, num_bits: int, endian: str = "little") -> bitarray:
    # 超出位宽的高位被截断，保证 int2ba 不会溢出
    return int2ba(bits & bit_mask(num_bits), length=num_bits, endian=endian)


def randbits(rng: np.random.Generator, p1: float, num_bits: int) -> BitVector:
    """
    Return a num_bits-wide vector where each bit is independently 1 with probability p1.

    Uses a strict ``< p1`` comparison against uniform draws in [0, 1), so
    p1 = 0 yields all zeros and p1 = 1 yields all ones.
    """
    if num_bits <= 0:
        raise ParamValidationError("num_bits must be positive")
    draws = rng.random(num_bits) < p1
    return ba2int(bitarray(draws.tolist(), endian="little"))


def to_bytes(bits: BitVector, num_bytes: int) -> bytes:
    """
    Pack bits into num_bytes bytes, least significant byte first.

    Bit positions [8k, 8k + 8) become output byte k.
    """
    if num_bytes <= 0:
        raise ParamValidationError("num_bytes must be positive")
    return _as_bitarray(bits, num_bytes * 8).tobytes()


def from_bytes(payload: bytes) -> BitVector:
    """Inverse of to_bytes."""
    if not payload:
        raise ParamValidationError("payload must not be empty")
    ba = bitarray(endian="little")
    ba.frombytes(bytes(payload))
    return ba2int(ba)


def bit_indices(bits: BitVector, num_bits: int) -> List[int]:
    """Return the positions set in bits, in increasing order."""
    return [i for i, bit in enumerate(_as_bitarray(bits, num_bits)) if bit]


def count_ones(bits: BitVector) -> int:
    if bits < 0:
        raise ParamValidationError("bit vectors must be non-negative")
    return int2ba(bits).count() if bits else 0


def bit_string(bits: BitVector, num_bits: int) -> str:
    """Like bin(), but MSB first with leading zeroes and no '0b'."""
    return _as_bitarray(bits, num_bits, endian="big").to01()
