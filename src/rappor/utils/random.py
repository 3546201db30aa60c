"""
Random number generation helpers.

Responsibilities
  - Centralize numpy Generator creation and seeding.
  - Reseed an existing generator in place (used for memoized PRR draws).
  - Provide reproducible splits so each worker can own a private generator.

Limitations
  - Relies on numpy Generator behavior for reproducibility.
"""
# 说明：随机数生成辅助工具，用于在库中统一管理 RNG 的创建、重置与拆分，避免依赖进程级全局随机状态。
# 职责：
# - create_rng / reseed_rng：集中封装 numpy Generator 的创建与重置逻辑，支持显式种子与已有生成器
# - split_rng：从单一 RNG 派生出多个独立生成器，便于每个并发编码任务持有私有随机源

from __future__ import annotations

from typing import List, Sequence, Union

import numpy as np

from .config import get_config

SeedLike = Union[None, int, Sequence[int], np.random.SeedSequence, np.random.Generator]


def create_rng(seed: SeedLike = None) -> np.random.Generator:
    """Create a numpy Generator from a seed, entropy sequence, or existing generator."""
    # 若已是 Generator 则直接返回；未给定种子时回退到运行时配置中的 rng_seed
    if isinstance(seed, np.random.Generator):
        return seed
    if seed is None:
        seed = get_config().rng_seed
    return np.random.default_rng(seed)


def reseed_rng(rng: np.random.Generator, seed: SeedLike) -> np.random.Generator:
    """Replace RNG state with a new seed; returns the generator for chaining."""
    # 用新的种子生成状态并替换给定 rng 的内部状态，保持对象标识不变
    new_state = np.random.default_rng(seed).bit_generator.state
    rng.bit_generator.state = new_state
    return rng


def split_rng(rng: np.random.Generator, num: int) -> List[np.random.Generator]:
    """Split an RNG into `num` independent generators."""
    # 基于底层 SeedSequence.spawn 从单一 RNG 派生出 num 个彼此独立的生成器
    if num <= 0:
        raise ValueError("num must be positive")
    seeds = rng.bit_generator._seed_seq.spawn(num)  # type: ignore[attr-defined]
    return [np.random.default_rng(seed) for seed in seeds]

