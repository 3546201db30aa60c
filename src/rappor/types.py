"""
Shared type definitions for the encoding pipeline.
"""
# 说明：编码流水线中共享的类型别名与阶段结果载体。
# 职责：
# - BitVector：以非负整数表示的定宽比特向量，bit 0 为最低位
# - EncodedStages：承载 Bloom、PRR、IRR 与最终字节报告，便于模拟与测试

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

BitVector = int
# 语义上是比特位置的集合而非数值

ByteReport = bytes


@dataclass(frozen=True)
class EncodedStages:
    """
    Every intermediate stage of one encode call.

    Only ``report`` is meant to leave the client; ``bloom`` and ``prr`` reveal
    far more than the privacy guarantees allow and exist for simulation and
    testing.
    """

    bloom: BitVector
    prr: BitVector
    irr: BitVector
    report: ByteReport

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bloom": self.bloom,
            "prr": self.prr,
            "irr": self.irr,
            "report": self.report.hex(),
        }
