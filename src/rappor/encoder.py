"""
RAPPOR encoders: hashing followed by the permanent and instantaneous
randomized responses.

Responsibilities
  - Latch parameter validity at construction and refuse to encode when invalid.
  - Build the Bloom bit vector with either the direct string hash (Encoder)
    or a sliced digest (DigestEncoder).
  - Apply the shared PRR/IRR pipeline and pack the report little-endian.

Usage Context
  - Construct one encoder per (metric, cohort) pair and reuse it.
  - Randomness capabilities are owned by the caller and may be shared.

Limitations
  - The cohort is recorded but does not select a hash family.
"""
# 说明：RAPPOR 客户端编码器，先哈希得到 Bloom 比特向量，再依次执行永久随机响应（PRR）与瞬时随机响应（IRR），最后按低位字节在前打包。
# 职责：
# - 构造阶段校验位宽是否为 8 的倍数且受 hash_part_width 支持，结果锁存为 is_valid()
# - Encoder：基于直接字符串哈希构造 Bloom 向量；DigestEncoder：对一次摘要切片构造 Bloom 向量
# - 两类编码器共享同一套 PRR/IRR 随机化流程与序列化逻辑
# - 对无效编码器调用 encode 时抛出 InvalidEncoderError，而不是返回未定义结果

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional, Union

from rappor.bit_utils import bit_indices, bit_mask, bit_string, to_bytes
from rappor.hashing import (
    DigestFunc,
    HmacFunc,
    digest_bloom,
    direct_bloom,
    hmac_sha256,
    md5_digest,
    to_value_bytes,
)
from rappor.params import Params, hash_part_width, is_supported_width
from rappor.rand import DeterministicRand, HmacDeterministicRand, IrrRand
from rappor.types import BitVector, EncodedStages
from rappor.utils.logging import get_logger
from rappor.utils.param_validation import ParamValidationError, ensure_type

logger = get_logger(__name__)

Value = Union[str, bytes]


class InvalidEncoderError(RuntimeError):
    """Raised when encoding is attempted with an encoder whose parameters were rejected."""


def permanent_response(bloom: BitVector, f_bits: BitVector, uniform: BitVector, num_bits: int) -> BitVector:
    """
    Combine the Bloom bits with the memoized noise masks.

    Where ``uniform`` is 1 the output is the biased noise bit from ``f_bits``;
    elsewhere it is the true Bloom bit.
    """
    return ((f_bits & uniform) | (bloom & ~uniform)) & bit_mask(num_bits)


def instantaneous_response(prr: BitVector, p_bits: BitVector, q_bits: BitVector, num_bits: int) -> BitVector:
    """
    If a PRR bit is 0 the IRR bit is 1 with probability p; if it is 1, with
    probability q.
    """
    return ((p_bits & ~prr) | (q_bits & prr)) & bit_mask(num_bits)


class BaseRapporEncoder(ABC):
    """
    Shared construction, validation and randomization for RAPPOR encoders.

    Subclasses only decide how a value becomes a Bloom bit vector.
    """

    def __init__(
        self,
        metric_name: str,
        cohort: int,
        params: Params,
        det_rand: DeterministicRand,
        irr_rand: IrrRand,
    ):
        ensure_type(params, (Params,), label="params")
        ensure_type(det_rand, (DeterministicRand,), label="det_rand")
        ensure_type(irr_rand, (IrrRand,), label="irr_rand")
        self.metric_name = metric_name
        self.cohort = int(cohort)
        self.params = params
        self._det_rand = det_rand
        self._irr_rand = irr_rand
        self._num_bytes = 0
        self._hash_part_width = hash_part_width(params.num_bits)
        self._valid = self._check_params()

    def _check_params(self) -> bool:
        # 位宽非法属于配置错误：记录日志并锁存为无效状态，不抛异常
        num_bits = self.params.num_bits
        if num_bits % 8 != 0:
            logger.warning("metric %s: num_bits=%d is not a whole number of bytes", self.metric_name, num_bits)
            return False
        self._num_bytes = num_bits // 8
        logger.info("num bytes: %d", self._num_bytes)
        if not is_supported_width(num_bits):
            logger.warning("metric %s: unsupported bloom width %d", self.metric_name, num_bits)
            return False
        return True

    @property
    def num_bytes(self) -> int:
        return self._num_bytes

    @property
    def hash_part_width(self) -> int:
        return self._hash_part_width

    def is_valid(self) -> bool:
        return self._valid

    def _ensure_valid(self) -> None:
        if not self._valid:
            raise InvalidEncoderError(
                f"encoder for metric {self.metric_name!r} has invalid params (num_bits={self.params.num_bits})"
            )

    @abstractmethod
    def _bloom(self, value: bytes) -> BitVector:
        """Return the Bloom bit vector for the value bytes."""
        raise NotImplementedError

    def _randomize(self, bloom: BitVector, seed_value: bytes) -> EncodedStages:
        num_bits = self.params.num_bits

        # 每次都以取值重新设定种子，等价于论文中的记忆化（memoization）且不占用存储
        f_bits, uniform = self._det_rand.prr_masks(seed_value)
        logger.debug("f_bits: %s", bit_string(f_bits, num_bits))
        logger.debug("uniform: %s", bit_string(uniform, num_bits))
        prr = permanent_response(bloom, f_bits, uniform, num_bits)
        logger.debug("prr: %s", bit_string(prr, num_bits))

        p_bits, q_bits = self._irr_rand.irr_masks()
        logger.debug("p_bits: %s", bit_string(p_bits, num_bits))
        logger.debug("q_bits: %s", bit_string(q_bits, num_bits))
        irr = instantaneous_response(prr, p_bits, q_bits, num_bits)
        logger.debug("irr: %s", bit_string(irr, num_bits))

        return EncodedStages(bloom=bloom, prr=prr, irr=irr, report=to_bytes(irr, self._num_bytes))

    def encode_stages(self, value: Value) -> EncodedStages:
        """
        Encode value and return every intermediate stage.

        Raises:
            InvalidEncoderError: if the encoder was constructed with invalid params.
        """
        self._ensure_valid()
        value_bytes = to_value_bytes(value)
        bloom = self._bloom(value_bytes)
        logger.debug("bloom: %s", bit_string(bloom, self.params.num_bits), extra={"value": value})
        return self._randomize(bloom, value_bytes)

    def encode(self, value: Value) -> bytes:
        """Encode value into a report of exactly num_bytes bytes."""
        return self.encode_stages(value).report

    def encode_bits(self, bits: BitVector) -> EncodedStages:
        """
        Run the PRR/IRR pipeline on caller-supplied Bloom bits.

        The PRR is seeded with the packed bits, so repeated calls with the same
        bits reuse the same permanent noise.
        """
        self._ensure_valid()
        ensure_type(bits, (int,), label="bits")
        if bits < 0:
            raise ParamValidationError("bits must be non-negative")
        if bits >> self.params.num_bits:
            raise ParamValidationError(f"bits do not fit in {self.params.num_bits} bits")
        return self._randomize(bits, to_bytes(bits, self._num_bytes))

    def get_metadata(self) -> Mapping[str, Any]:
        """Metadata describing the encoder configuration."""
        meta: Dict[str, Any] = {
            "type": self.__class__.__name__,
            "metric_name": self.metric_name,
            "cohort": self.cohort,
            "valid": self._valid,
            "num_bytes": self._num_bytes,
        }
        meta.update(self.params.to_dict())
        return meta


class Encoder(BaseRapporEncoder):
    """
    Encoder that hashes with the direct string hash.

    The general noise source ``rand`` supplies the IRR masks; ``det_rand``
    supplies the memoized PRR masks.
    """

    def __init__(
        self,
        metric_name: str,
        cohort: int,
        params: Params,
        det_rand: DeterministicRand,
        rand: IrrRand,
    ):
        super().__init__(metric_name, cohort, params, det_rand, rand)

    def _bloom(self, value: bytes) -> BitVector:
        bloom = direct_bloom(value, self.params.num_hashes, self.params.num_bits)
        logger.debug("hash bits set: %s", bit_indices(bloom, self.params.num_bits))
        return bloom


class DigestEncoder(BaseRapporEncoder):
    """
    Encoder that slices one digest of the value into Bloom bit positions.

    - Configuration
      - irr_rand: Per-report noise source for the IRR.
      - secret: Client secret keying the PRR when no det_rand is given.
      - det_rand: Optional explicit deterministic source for the PRR.
      - digest_func: Digest used for the Bloom stage (MD5 by default).
      - hmac_func: Keyed digest used by the default PRR source.

    - Behavior
      - Valid only if num_hashes slices of hash_part_width bits fit in the digest.
      - Randomization is identical to ``Encoder``.
    """

    def __init__(
        self,
        metric_name: str,
        cohort: int,
        params: Params,
        irr_rand: IrrRand,
        *,
        secret: Optional[Union[str, bytes]] = None,
        det_rand: Optional[DeterministicRand] = None,
        digest_func: DigestFunc = md5_digest,
        hmac_func: HmacFunc = hmac_sha256,
    ):
        if det_rand is None:
            if secret is None:
                raise ParamValidationError("either secret or det_rand is required")
            det_rand = HmacDeterministicRand(params, secret, hmac_func=hmac_func)
        self._digest_func = digest_func
        self._digest_bits = len(digest_func(b"")) * 8
        super().__init__(metric_name, cohort, params, det_rand, irr_rand)

    def _check_params(self) -> bool:
        if not super()._check_params():
            return False
        needed = self.params.num_hashes * self._hash_part_width
        if needed > self._digest_bits:
            logger.warning(
                "metric %s: %d hashes of %d bits exceed the %d-bit digest",
                self.metric_name,
                self.params.num_hashes,
                self._hash_part_width,
                self._digest_bits,
            )
            return False
        return True

    def _bloom(self, value: bytes) -> BitVector:
        return digest_bloom(
            value,
            self.params.num_hashes,
            self.params.num_bits,
            self._hash_part_width,
            digest_func=self._digest_func,
        )
