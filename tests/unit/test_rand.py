"""
Unit tests for the randomness capabilities.
"""
# 说明：确定性随机源、通用噪声源、IRR 噪声源与固定掩码实现的单元测试。
# 覆盖：
# - SeededDeterministicRand：同一取值重设种子后掩码完全一致，不同取值掩码不同
# - HmacDeterministicRand：掩码由密钥与取值共同决定
# - SimpleRand / SimpleIrrRand：p/q/f 掩码的经验频率与边界概率
# - spawn 生成相互独立的私有随机源，以及 FixedRand 的常量行为

import pytest

from rappor.bit_utils import bit_mask, count_ones
from rappor.params import Params
from rappor.rand import (
    DeterministicRand,
    FixedRand,
    HmacDeterministicRand,
    IrrRand,
    Rand,
    SeededDeterministicRand,
    SimpleIrrRand,
    SimpleRand,
)
from rappor.utils.param_validation import ParamValidationError
from rappor.utils.random import create_rng


def test_seeded_rand_is_memoized_per_value(params64) -> None:
    # 同一取值重设种子后得到完全相同的 f_bits 与 uniform
    det = SeededDeterministicRand(params64, rng=create_rng(0))
    first = det.prr_masks(b"chrome")
    det.prr_masks(b"firefox")
    assert det.prr_masks(b"chrome") == first


def test_seeded_rand_does_not_depend_on_initial_state(params64) -> None:
    # 掩码只由取值决定，与随机源初始状态无关
    a = SeededDeterministicRand(params64, rng=create_rng(1))
    b = SeededDeterministicRand(params64, rng=create_rng(2))
    assert a.prr_masks("value") == b.prr_masks(b"value")


def test_seeded_rand_distinguishes_values(params64) -> None:
    det = SeededDeterministicRand(params64)
    assert det.prr_masks(b"a") != det.prr_masks(b"b")
    assert det.prr_masks(b"a") != det.prr_masks(b"a\x00")


def test_seed_then_draw_matches_prr_masks(params64) -> None:
    det = SeededDeterministicRand(params64)
    det.seed(b"v")
    manual = (det.f_bits(), det.uniform())
    assert det.prr_masks(b"v") == manual


def test_hmac_rand_depends_on_secret(params64) -> None:
    # 相同取值在不同密钥下得到不同的永久噪声
    one = HmacDeterministicRand(params64, secret="secret-1")
    two = HmacDeterministicRand(params64, secret=b"secret-2")
    same = HmacDeterministicRand(params64, secret="secret-1")
    assert one.prr_masks(b"v") != two.prr_masks(b"v")
    assert one.prr_masks(b"v") == same.prr_masks(b"v")


def test_hmac_rand_requires_bytes_like_secret(params64) -> None:
    with pytest.raises(ParamValidationError):
        HmacDeterministicRand(params64, secret=123)  # type: ignore[arg-type]


def test_uniform_and_f_bits_frequencies() -> None:
    # uniform 每位为 1 的概率约 1/2，f_bits 约为 prob_f
    params = Params(num_bits=128, num_hashes=1, prob_f=0.2)
    det = SeededDeterministicRand(params)
    draws = 200
    f_ones = 0
    u_ones = 0
    for i in range(draws):
        f_bits, uniform = det.prr_masks(f"value-{i}".encode())
        f_ones += count_ones(f_bits)
        u_ones += count_ones(uniform)
    total = draws * 128
    assert f_ones / total == pytest.approx(0.2, abs=0.02)
    assert u_ones / total == pytest.approx(0.5, abs=0.02)


def test_irr_rand_edge_probabilities() -> None:
    params = Params(num_bits=32, num_hashes=1, prob_p=0.0, prob_q=1.0)
    irr = SimpleIrrRand(params, rng=create_rng(9))
    assert irr.irr_masks() == (0, bit_mask(32))


def test_irr_rand_draws_fresh_masks() -> None:
    # IRR 掩码每次调用重新采样，连续两次几乎不可能相同
    params = Params(num_bits=128, num_hashes=1, prob_p=0.5, prob_q=0.5)
    irr = SimpleIrrRand(params, rng=create_rng(4))
    assert irr.irr_masks() != irr.irr_masks()


def test_simple_rand_serves_irr_role() -> None:
    params = Params(num_bits=16, num_hashes=1, prob_f=1.0, prob_p=1.0, prob_q=0.0)
    rand = SimpleRand(params, rng=create_rng(0))
    assert isinstance(rand, IrrRand)
    assert isinstance(rand, Rand)
    assert rand.f_bits() == 0xFFFF
    assert rand.irr_masks() == (0xFFFF, 0)


def test_spawn_produces_independent_sources() -> None:
    # spawn 派生的各随机源彼此独立且与原类型一致
    params = Params(num_bits=128, num_hashes=1, prob_p=0.5, prob_q=0.5)
    children = SimpleIrrRand(params, rng=create_rng(12)).spawn(3)
    assert len(children) == 3
    assert all(isinstance(child, SimpleIrrRand) for child in children)
    masks = [child.p_bits() for child in children]
    assert len(set(masks)) == 3


def test_spawn_is_reproducible() -> None:
    params = Params(num_bits=64, num_hashes=1)
    a = SimpleRand(params, rng=create_rng(7)).spawn(2)
    b = SimpleRand(params, rng=create_rng(7)).spawn(2)
    assert [r.f_bits() for r in a] == [r.f_bits() for r in b]


def test_fixed_rand_constant_masks() -> None:
    # FixedRand 同时满足三类角色，seed 不改变输出
    fixed = FixedRand(f_bits=0x0F, uniform=0xF0, p_bits=0x3, q_bits=0xC)
    assert isinstance(fixed, DeterministicRand)
    assert isinstance(fixed, Rand)
    assert fixed.prr_masks(b"a") == fixed.prr_masks(b"b") == (0x0F, 0xF0)
    assert fixed.irr_masks() == (0x3, 0xC)
    assert FixedRand.passthrough(8).irr_masks() == (0, 0xFF)


def test_fixed_rand_rejects_negative_masks() -> None:
    with pytest.raises(ParamValidationError):
        FixedRand(uniform=-1)
