"""
Hashing stages that turn a raw value into a Bloom filter bit vector.

Responsibilities
  - Direct hashing: a djb2-style multiplicative string hash per hash index.
  - Digest hashing: one cryptographic digest sliced into fixed-width chunks,
    each chunk selecting one Bloom bit.
  - Default pluggable digest and keyed-digest functions.

Limitations
  - Hashing is not reversible and collisions are possible by design.
  - Cohort-specific hash families are not modeled; every cohort hashes the
    same way.
"""
# 说明：编码流水线的哈希阶段，将原始取值映射为 Bloom Filter 风格的比特向量，只置位不清位。
# 职责：
# - string_hash / direct_bloom：基于 h = h * 33 + byte（初值 5381）的直接字符串哈希
# - digest_slices / digest_bloom：对一次摘要结果按 hash_part_width 切片，避免为每个哈希下标重复计算摘要
# - md5_digest / hmac_sha256：默认摘要与带密钥摘要函数，调用方可替换

from __future__ import annotations

import hashlib
import hmac
from typing import Callable, List, Union

from rappor.bit_utils import set_bit
from rappor.types import BitVector
from rappor.utils.param_validation import ParamValidationError, ensure, ensure_type

DigestFunc = Callable[[bytes], bytes]
HmacFunc = Callable[[bytes, bytes], bytes]

HASH_SEED = 5381
_HASH_MASK = 0xFFFFFFFF


def to_value_bytes(value: Union[str, bytes, bytearray]) -> bytes:
    """Return the bytes that get hashed: UTF-8 for str, unchanged for bytes."""
    ensure_type(value, (str, bytes, bytearray), label="value")
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


def string_hash(value: Union[str, bytes], hash_index: int = 0) -> int:
    """
    djb2-style hash with 32-bit unsigned wraparound.

    ``hash_index`` offsets the initial state so each index acts as a distinct
    hash function; index 0 is the classic hash.
    """
    ensure(hash_index >= 0, "hash_index must be non-negative")
    h = (HASH_SEED + hash_index) & _HASH_MASK
    for byte in to_value_bytes(value):
        h = (h * 33 + byte) & _HASH_MASK
    return h


def direct_bloom(value: Union[str, bytes], num_hashes: int, num_bits: int) -> BitVector:
    """Set bit string_hash(value, i) % num_bits for every hash index i."""
    ensure(num_hashes >= 1, "num_hashes must be at least 1")
    ensure(num_bits > 0, "num_bits must be positive")
    bloom = 0
    for i in range(num_hashes):
        bloom = set_bit(bloom, string_hash(value, i) % num_bits)
    return bloom


def md5_digest(value: bytes) -> bytes:
    return hashlib.md5(value).digest()


def hmac_sha256(key: bytes, value: bytes) -> bytes:
    return hmac.new(key, value, digestmod=hashlib.sha256).digest()


def digest_slices(digest: bytes, num_hashes: int, part_width: int) -> List[int]:
    """
    Partition a digest into num_hashes consecutive part_width-bit chunks.

    The digest is read as one little-endian integer and chunks are taken from
    the least significant end, so chunk i covers bits
    [i * part_width, (i + 1) * part_width) and no two chunks share a bit.
    """
    ensure(num_hashes >= 1, "num_hashes must be at least 1")
    ensure(part_width > 0, "part_width must be positive")
    available = len(digest) * 8
    if num_hashes * part_width > available:
        raise ParamValidationError(
            f"{num_hashes} hashes of {part_width} bits need more than the {available} bits in the digest"
        )
    h = int.from_bytes(digest, "little")
    part_mask = (1 << part_width) - 1
    slices: List[int] = []
    for _ in range(num_hashes):
        slices.append(h & part_mask)
        h >>= part_width
    return slices


def digest_bloom(
    value: Union[str, bytes],
    num_hashes: int,
    num_bits: int,
    part_width: int,
    digest_func: DigestFunc = md5_digest,
) -> BitVector:
    """Set bit (slice % num_bits) for each slice of digest_func(value)."""
    ensure(num_bits > 0, "num_bits must be positive")
    bloom = 0
    for chunk in digest_slices(digest_func(to_value_bytes(value)), num_hashes, part_width):
        bloom = set_bit(bloom, chunk % num_bits)
    return bloom
