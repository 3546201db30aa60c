"""Shared pytest configuration and path setup for test modules."""

import sys
from pathlib import Path

import pytest

# Ensure repo root and src/ are on sys.path for all tests
_ROOT = Path(__file__).resolve().parents[1]
_SRC = _ROOT / "src"
for p in (str(_ROOT), str(_SRC)):
    if p not in sys.path:
        sys.path.insert(0, p)

from rappor.params import Params  # noqa: E402
from rappor.utils.config import get_config  # noqa: E402


@pytest.fixture
def params8() -> Params:
    # 8 位、单哈希、无 PRR 噪声且 IRR 直通的参数组合
    return Params(num_bits=8, num_hashes=1, prob_f=0.0, prob_p=0.0, prob_q=1.0)


@pytest.fixture
def params64() -> Params:
    return Params(num_bits=64, num_hashes=2, prob_f=0.5, prob_p=0.25, prob_q=0.75)


@pytest.fixture(autouse=True)
def _restore_runtime_config():
    # 测试可能修改全局运行时配置，结束后恢复原值避免相互影响
    cfg = get_config()
    snapshot = (cfg.log_level, cfg.mask_sensitive_fields, cfg.rng_seed, dict(cfg.extra))
    yield
    cfg.log_level, cfg.mask_sensitive_fields, cfg.rng_seed, extra = snapshot
    cfg.extra = extra
