import copy
import pickle
import random

import pytest

from desengine.bits import Block64, Key56, MasterKey64, RoundKey48
from desengine.key_schedule import (
    NUM_ROUNDS, SHIFT_SCHEDULE, RoundKeys, derive_round_keys, has_odd_parity,
    rotate_left, with_odd_parity,
)
from desengine.key_schedule.des_key_schedule import key_halves
from desengine.permutation import PC2, permute

KEY = MasterKey64.from_hex('133457799BBCDFF1')


def test_known_round_keys():
    schedule = derive_round_keys(KEY)
    assert len(schedule) == NUM_ROUNDS
    assert schedule[0] == RoundKey48.from_hex('1B02EFFC7072')
    assert schedule[1] == RoundKey48.from_hex('79AED9DBC9E5')
    assert schedule[15] == RoundKey48.from_hex('CB3D8B0E17F5')


def test_accepts_bytes_and_int_keys():
    expected = derive_round_keys(KEY)
    assert derive_round_keys(KEY.to_bytes()) == expected
    assert derive_round_keys(KEY.value) == expected


@pytest.mark.parametrize('bad_key', [b'\x00' * 7, b'\x00' * 9, 1 << 64, -1, Block64(0)])
def test_wrong_width_key_is_rejected(bad_key):
    with pytest.raises(ValueError):
        derive_round_keys(bad_key)


def test_shift_schedule_sums_to_28():
    assert len(SHIFT_SCHEDULE) == 16
    assert sum(SHIFT_SCHEDULE) == 28
    assert [r for r, s in enumerate(SHIFT_SCHEDULE, start=1) if s == 1] == [1, 2, 9, 16]


def test_halves_return_to_starting_alignment():
    rng = random.Random(1234)
    for _ in range(20):
        key = MasterKey64(rng.getrandbits(64))
        c0, d0 = key_halves(key)
        c, d = c0.value, d0.value
        for shift in SHIFT_SCHEDULE:
            c = rotate_left(c, shift)
            d = rotate_left(d, shift)
        assert (c, d) == (c0.value, d0.value)
        # So the last round key is PC-2 of the unrotated halves
        assert derive_round_keys(key)[15].value == permute(Key56.join(c0, d0), PC2)


def test_rotate_left():
    assert rotate_left(0b1000000000000000000000000001, 1) == 0b0000000000000000000000000011
    assert rotate_left(0xF0CCAAF, 1) == 0xE19955F
    assert rotate_left(0xF0CCAAF, 28) == 0xF0CCAAF
    assert rotate_left(0x80000000, 1, size=32) == 1
    assert rotate_left(0xF0CCAAF, 29) == rotate_left(0xF0CCAAF, 1)


def test_rotate_left_rejects_negative_shift_and_bad_size():
    with pytest.raises(ValueError, match="negative"):
        rotate_left(0xF0CCAAF, -1)
    with pytest.raises(ValueError, match="positive"):
        rotate_left(1, 1, size=0)


def test_parity_bits_do_not_affect_schedule():
    rng = random.Random(99)
    for _ in range(10):
        key = MasterKey64(rng.getrandbits(64))
        flipped = MasterKey64(key.value ^ 0x0101010101010101)
        assert derive_round_keys(key) == derive_round_keys(flipped)


def test_parity_helpers():
    assert has_odd_parity(KEY)
    assert not has_odd_parity(MasterKey64(0))
    fixed = with_odd_parity(0)
    assert fixed == MasterKey64.from_hex('0101010101010101')
    assert has_odd_parity(fixed)
    key = MasterKey64.from_hex('123456789ABCDEF0')
    assert derive_round_keys(with_odd_parity(key)) == derive_round_keys(key)


def test_weak_keys_have_constant_schedules():
    assert set(derive_round_keys(0x0101010101010101)) == {RoundKey48(0)}
    assert set(derive_round_keys(0xFEFEFEFEFEFEFEFE)) == {RoundKey48((1 << 48) - 1)}


def test_round_keys_are_immutable_and_reversible():
    schedule = derive_round_keys(KEY)
    with pytest.raises(TypeError):
        schedule[0] = RoundKey48(0)
    backwards = schedule.reversed_order()
    assert list(backwards) == list(reversed(list(schedule)))
    assert backwards.reversed_order() == schedule
    with pytest.raises(AttributeError):
        schedule._keys = ()
    with pytest.raises(AttributeError):
        schedule.extra = 1
    assert len(schedule) == NUM_ROUNDS


def test_round_keys_copy_and_pickle():
    schedule = derive_round_keys(KEY)
    for clone in (copy.copy(schedule), copy.deepcopy(schedule),
                  pickle.loads(pickle.dumps(schedule))):
        assert isinstance(clone, RoundKeys)
        assert clone == schedule
        assert clone[0] == RoundKey48.from_hex('1B02EFFC7072')
        with pytest.raises(AttributeError):
            clone._keys = ()


def test_round_keys_require_sixteen_entries():
    keys = list(derive_round_keys(KEY))
    with pytest.raises(ValueError, match="exactly 16"):
        RoundKeys(keys[:15])
    with pytest.raises(ValueError, match="exactly 16"):
        RoundKeys(keys + keys[:1])
    with pytest.raises(ValueError, match="RoundKey48"):
        RoundKeys([k.value for k in keys])
