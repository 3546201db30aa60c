"""Client-side RAPPOR encoding: Bloom hashing plus permanent and instantaneous randomized response."""

from __future__ import annotations

from .params import SUPPORTED_WIDTHS, UNSUPPORTED_WIDTH, Params, hash_part_width
from .types import BitVector, EncodedStages
from .rand import (
    DeterministicRand,
    FixedRand,
    HmacDeterministicRand,
    IrrRand,
    Rand,
    SeededDeterministicRand,
    SimpleIrrRand,
    SimpleRand,
)
from .encoder import (
    BaseRapporEncoder,
    DigestEncoder,
    Encoder,
    InvalidEncoderError,
    instantaneous_response,
    permanent_response,
)

__version__ = "0.1.0"

__all__ = [
    "SUPPORTED_WIDTHS",
    "UNSUPPORTED_WIDTH",
    "Params",
    "hash_part_width",
    "BitVector",
    "EncodedStages",
    "DeterministicRand",
    "IrrRand",
    "Rand",
    "SeededDeterministicRand",
    "HmacDeterministicRand",
    "SimpleRand",
    "SimpleIrrRand",
    "FixedRand",
    "BaseRapporEncoder",
    "Encoder",
    "DigestEncoder",
    "InvalidEncoderError",
    "permanent_response",
    "instantaneous_response",
]
