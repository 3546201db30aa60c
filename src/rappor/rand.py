"""
Randomness capabilities consumed by the encoders.

Responsibilities
  - Define the three capability roles: a seedable deterministic source for the
    permanent response, a legacy general noise source, and a per-report
    instantaneous response source.
  - Provide numpy-backed implementations that own an explicit Generator.
  - Provide a constant-mask implementation for simulation and pass-through runs.

Usage Context
  - Construct capabilities once and hand them to one or more encoders.
  - Encoders only call them; they never own the capability lifetime.

Limitations
  - A capability shared across threads is serialized by its own lock; use
    ``spawn`` to give each worker a private instance instead.
"""
# 说明：编码器依赖的随机能力接口与实现，分为确定性（可重置种子）源、通用噪声源与 IRR 噪声源三类角色。
# 职责：
# - DeterministicRand：seed(value) 后依次产生 f_bits 与 uniform 掩码，同一取值总是得到相同掩码
# - Rand / IrrRand：每次调用产生新的 p_bits/q_bits（以及旧式接口中的 f_bits）掩码
# - 所有实现持有显式构造的 numpy Generator，不依赖进程级全局随机状态
# - prr_masks/irr_masks 在实例锁内完成 "seed -> 取样" 序列，保证并发共享时不交错

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Tuple, Union

import numpy as np

from rappor.bit_utils import bit_mask, randbits
from rappor.hashing import HmacFunc, hmac_sha256, to_value_bytes
from rappor.params import Params
from rappor.types import BitVector
from rappor.utils.param_validation import ParamValidationError, ensure_type
from rappor.utils.random import create_rng, reseed_rng, split_rng

Masks = Tuple[BitVector, BitVector]


def _entropy(value: bytes) -> List[int]:
    # 长度前缀保证 b"a" 与 b"a\x00" 得到不同的种子
    return [len(value), *value]


class DeterministicRand(ABC):
    """
    Seedable source for the permanent randomized response.

    After ``seed(value)``, ``f_bits()`` returns bits that are 1 with
    probability ``prob_f`` and ``uniform()`` returns bits that are 1 with
    probability 1/2. Identical seeds produce identical subsequent draws.
    """

    def __init__(self) -> None:
        self.lock = threading.RLock()

    @abstractmethod
    def seed(self, value: bytes) -> None:
        raise NotImplementedError

    @abstractmethod
    def f_bits(self) -> BitVector:
        raise NotImplementedError

    @abstractmethod
    def uniform(self) -> BitVector:
        raise NotImplementedError

    def prr_masks(self, value: bytes) -> Masks:
        """Seed with value then draw (f_bits, uniform) as one atomic step."""
        with self.lock:
            self.seed(value)
            f_bits = self.f_bits()
            uniform = self.uniform()
        return f_bits, uniform


class IrrRand(ABC):
    """Per-report noise source for the instantaneous randomized response."""

    def __init__(self) -> None:
        self.lock = threading.RLock()

    @abstractmethod
    def p_bits(self) -> BitVector:
        raise NotImplementedError

    @abstractmethod
    def q_bits(self) -> BitVector:
        raise NotImplementedError

    def irr_masks(self) -> Masks:
        """Draw fresh (p_bits, q_bits)."""
        with self.lock:
            return self.p_bits(), self.q_bits()


class Rand(IrrRand):
    """Legacy single-pass noise source; also serves the IRR role."""

    @abstractmethod
    def f_bits(self) -> BitVector:
        raise NotImplementedError


class SeededDeterministicRand(DeterministicRand):
    """
    numpy-backed deterministic source.

    ``seed`` replaces the generator state with one derived from the value
    bytes, which memoizes the PRR without storing it.
    """

    def __init__(self, params: Params, rng: Optional[np.random.Generator] = None):
        super().__init__()
        self.params = params
        self._rng = create_rng(rng)

    def _entropy_for(self, value: bytes) -> List[int]:
        return _entropy(value)

    def seed(self, value: Union[str, bytes]) -> None:
        reseed_rng(self._rng, self._entropy_for(to_value_bytes(value)))

    def f_bits(self) -> BitVector:
        return randbits(self._rng, self.params.prob_f, self.params.num_bits)

    def uniform(self) -> BitVector:
        return randbits(self._rng, 0.5, self.params.num_bits)


class HmacDeterministicRand(SeededDeterministicRand):
    """
    Deterministic source keyed by a client secret.

    The generator is reseeded from ``hmac_func(secret, value)``, so the PRR is a
    memoized function of the value that the collector cannot recompute.
    """

    def __init__(self, params: Params, secret: Union[str, bytes], hmac_func: HmacFunc = hmac_sha256):
        ensure_type(secret, (str, bytes, bytearray), label="secret")
        super().__init__(params)
        self._secret = to_value_bytes(secret)
        self._hmac_func = hmac_func

    def _entropy_for(self, value: bytes) -> List[int]:
        return _entropy(self._hmac_func(self._secret, value))


class _NumpyNoise:
    # 非确定性噪声源的公共部分：持有 Generator 并按参数采样掩码

    params: Params
    _rng: np.random.Generator

    def _init_rng(self, params: Params, rng: Optional[np.random.Generator]) -> None:
        self.params = params
        self._rng = create_rng(rng)

    def p_bits(self) -> BitVector:
        return randbits(self._rng, self.params.prob_p, self.params.num_bits)

    def q_bits(self) -> BitVector:
        return randbits(self._rng, self.params.prob_q, self.params.num_bits)

    def spawn(self, num: int) -> List[Any]:
        """Return num independent sources of the same kind for per-worker use."""
        return [type(self)(self.params, rng) for rng in split_rng(self._rng, num)]


class SimpleIrrRand(_NumpyNoise, IrrRand):
    """IRR source backed by an explicitly owned numpy Generator."""

    def __init__(self, params: Params, rng: Optional[np.random.Generator] = None):
        IrrRand.__init__(self)
        self._init_rng(params, rng)


class SimpleRand(_NumpyNoise, Rand):
    """General noise source producing f, p and q masks."""

    def __init__(self, params: Params, rng: Optional[np.random.Generator] = None):
        Rand.__init__(self)
        self._init_rng(params, rng)

    def f_bits(self) -> BitVector:
        return randbits(self._rng, self.params.prob_f, self.params.num_bits)


class FixedRand(DeterministicRand, Rand):
    """
    Capability returning constant masks for every role.

    ``seed`` is a no-op, so the PRR depends only on the bloom bits. With
    ``uniform=0`` and ``p_bits=0, q_bits=all ones`` the report equals the
    Bloom filter.
    """

    def __init__(
        self,
        f_bits: BitVector = 0,
        uniform: BitVector = 0,
        p_bits: BitVector = 0,
        q_bits: BitVector = 0,
    ):
        for label, mask in (("f_bits", f_bits), ("uniform", uniform), ("p_bits", p_bits), ("q_bits", q_bits)):
            ensure_type(mask, (int,), label=label)
            if mask < 0:
                raise ParamValidationError(f"{label} must be non-negative")
        DeterministicRand.__init__(self)
        self._f_bits = f_bits
        self._uniform = uniform
        self._p_bits = p_bits
        self._q_bits = q_bits

    @classmethod
    def passthrough(cls, num_bits: int) -> "FixedRand":
        """Masks under which the report reproduces the Bloom filter exactly."""
        return cls(f_bits=0, uniform=0, p_bits=0, q_bits=bit_mask(num_bits))

    def seed(self, value: bytes) -> None:
        del value

    def f_bits(self) -> BitVector:
        return self._f_bits

    def uniform(self) -> BitVector:
        return self._uniform

    def p_bits(self) -> BitVector:
        return self._p_bits

    def q_bits(self) -> BitVector:
        return self._q_bits

