"""
RAPPOR encoding parameters and the Bloom width lookup.

Responsibilities
  - Hold the immutable bit width, hash count and noise probabilities.
  - Map a Bloom width to the number of bits one hash slice contributes.

Limitations
  - Whether ``num_bits`` is a supported width is decided by the encoders,
    which latch it as a validity flag instead of raising.
"""
# 说明：RAPPOR 编码参数集合与 Bloom 位宽查表工具。
# 职责：
# - Params：不可变参数对象，包含位宽、哈希个数以及 f/p/q 三个噪声概率
# - hash_part_width：将 Bloom 位宽映射为单个哈希切片需要的比特数（log2 位宽）
# - 提供 to_dict/from_dict 以便记录与复现实验配置

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping

from rappor.utils.param_validation import ParamValidationError, ensure, ensure_probability

SUPPORTED_WIDTHS = (8, 16, 32, 64, 128)

_HASH_PART_WIDTHS = {8: 3, 16: 4, 32: 5, 64: 6, 128: 7}

UNSUPPORTED_WIDTH = -1


def hash_part_width(bloom_width: int) -> int:
    """
    Return the number of bits one hash slice contributes, i.e. log2(bloom_width).

    Returns ``UNSUPPORTED_WIDTH`` (-1) for widths outside ``SUPPORTED_WIDTHS``.
    """
    return _HASH_PART_WIDTHS.get(bloom_width, UNSUPPORTED_WIDTH)


def is_supported_width(bloom_width: int) -> bool:
    return hash_part_width(bloom_width) != UNSUPPORTED_WIDTH


@dataclass(frozen=True)
class Params:
    """
    RAPPOR encoding parameters. These affect privacy/anonymity.

    - Configuration
      - num_bits: Width of the Bloom filter and of the report.
      - num_hashes: Number of bits set per value in the Bloom filter.
      - prob_f: Probability that a PRR bit is replaced by noise.
      - prob_p: Probability an IRR bit is 1 when the PRR bit is 0.
      - prob_q: Probability an IRR bit is 1 when the PRR bit is 1.
    """

    num_bits: int = 16
    num_hashes: int = 2
    prob_f: float = 0.5
    prob_p: float = 0.5
    prob_q: float = 0.75

    def __post_init__(self) -> None:
        # 位宽是否受支持由编码器在构造时锁存，这里只拦截明显非法的取值
        if isinstance(self.num_bits, bool) or not isinstance(self.num_bits, int):
            raise ParamValidationError("num_bits must be an integer")
        if isinstance(self.num_hashes, bool) or not isinstance(self.num_hashes, int):
            raise ParamValidationError("num_hashes must be an integer")
        ensure(self.num_bits > 0, "num_bits must be positive")
        ensure(self.num_hashes >= 1, "num_hashes must be at least 1")
        ensure_probability(self.prob_f, name="prob_f")
        ensure_probability(self.prob_p, name="prob_p")
        ensure_probability(self.prob_q, name="prob_q")

    @property
    def num_bytes(self) -> int:
        return self.num_bits // 8

    def to_dict(self) -> Dict[str, Any]:
        return {
            "num_bits": self.num_bits,
            "num_hashes": self.num_hashes,
            "prob_f": self.prob_f,
            "prob_p": self.prob_p,
            "prob_q": self.prob_q,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Params":
        # 仅做键查找与基本类型转换，缺省键沿用默认值
        defaults = cls.__dataclass_fields__
        return cls(
            num_bits=int(data.get("num_bits", defaults["num_bits"].default)),
            num_hashes=int(data.get("num_hashes", defaults["num_hashes"].default)),
            prob_f=float(data.get("prob_f", defaults["prob_f"].default)),
            prob_p=float(data.get("prob_p", defaults["prob_p"].default)),
            prob_q=float(data.get("prob_q", defaults["prob_q"].default)),
        )
