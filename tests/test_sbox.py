import numpy as np
import pytest

from desengine.sbox import SBOXES, sbox_lookup, substitute
from desengine.sbox.analysis import (
    difference_distribution_table, differential_uniformity, evaluate_sbox, is_row_permutation,
    avalanche_ratio, linear_approximation_table, linear_bias, verify_sboxes,
)


def test_every_row_is_a_permutation_of_0_to_15():
    assert len(SBOXES) == 8
    for box in SBOXES:
        assert len(box) == 4
        for row in box:
            assert sorted(row) == list(range(16))
    verify_sboxes()


def test_verify_sboxes_names_the_broken_row():
    broken = [list(map(list, box)) for box in SBOXES]
    broken[2][1][0] = broken[2][1][1]
    with pytest.raises(ValueError, match="S3 row 1"):
        verify_sboxes(broken)
    with pytest.raises(ValueError, match="Expected 8"):
        verify_sboxes(SBOXES[:7])


def test_is_row_permutation():
    assert is_row_permutation(list(range(16)))
    assert not is_row_permutation([0] * 16)
    assert not is_row_permutation(list(range(15)))


def test_lookup_uses_outer_bits_for_row():
    # 011011 -> row 01, column 1101 in S1
    assert sbox_lookup(0, 0b011011) == 5
    assert sbox_lookup(0, 0b000000) == 14
    assert sbox_lookup(0, 0b111111) == 13
    assert sbox_lookup(7, 0b100001) == SBOXES[7][3][0]


def test_substitute_known_round_one_value():
    # E(R0) ^ K1 for the classic worked example
    assert substitute(0x6117BA866527) == 0x5C82B597


def test_substitute_routes_groups_to_boxes_in_order():
    # All-zero input picks column 0, row 0 of every box
    expected = 0
    for box in SBOXES:
        expected = (expected << 4) | box[0][0]
    assert substitute(0) == expected


def test_difference_distribution_table_shape_and_totals():
    ddt = difference_distribution_table(0)
    assert ddt.shape == (64, 16)
    assert ddt[0, 0] == 64
    assert np.all(ddt.sum(axis=1) == 64)


@pytest.mark.parametrize('index', range(8))
def test_differential_uniformity_of_des_sboxes(index):
    assert 4 <= differential_uniformity(index) <= 16


def test_s1_best_differential():
    # Input difference 0x34 maps to output difference 0x2 for 16 of 64 inputs
    assert difference_distribution_table(0)[0x34, 0x2] == 16


def test_linear_approximation_table():
    lat = linear_approximation_table(4)
    assert lat.shape == (64, 16)
    assert lat[0, 0] == 32
    # Matsui's best approximation of S5
    assert lat[16, 15] == -20
    assert linear_bias(4) == pytest.approx(20 / 64)


@pytest.mark.parametrize('index', range(8))
def test_evaluate_sbox(index):
    metrics = evaluate_sbox(index)
    assert metrics['balanced'] is True
    assert metrics['differential'] <= 16
    assert 0 < metrics['linear'] <= 20 / 64


def test_avalanche_ratio_counts_every_input_bit():
    # Identity changes exactly the flipped bit
    assert avalanche_ratio(lambda b: b, [0, 0xFFFFFFFFFFFFFFFF]) == pytest.approx(1 / 64)
    # A byte-wide rotation also moves exactly one bit per flip
    rotate = lambda b: ((b << 3) | (b >> 5)) & 0xFF
    assert avalanche_ratio(rotate, range(4), block_size=8) == pytest.approx(1 / 8)
    # Complementing every bit whenever the low bit is set changes many bits
    spread = lambda b: b ^ 0xFE if b & 1 else b
    assert avalanche_ratio(spread, [0], block_size=8) == pytest.approx((8 + 7) / 64)


def test_avalanche_ratio_needs_a_sample():
    with pytest.raises(ValueError, match="At least one block"):
        avalanche_ratio(lambda b: b, [])
