import itertools

import pytest

from teachos.grind import ParkMiller, do_rand


def test_do_rand_from_one():
    assert do_rand(1) == 33613


def test_do_rand_state_is_taken_modulo():
    assert do_rand(0x7FFFFFFE) == do_rand(0)


@pytest.mark.parametrize("seed", [0, 1, 31, 7177, 0x7FFFFFFD, (1 << 64) - 1])
def test_values_in_range(seed):
    gen = ParkMiller(seed)
    for value in itertools.islice(gen, 200):
        assert 0 <= value <= 0x7FFFFFFD


def test_generator_follows_do_rand():
    gen = ParkMiller(1 ^ 31)
    state = 1 ^ 31
    for _ in range(50):
        state = do_rand(state)
        assert gen.next() == state


def test_same_seed_same_sequence():
    a = list(itertools.islice(ParkMiller(5), 20))
    b = list(itertools.islice(ParkMiller(5), 20))
    assert a == b


def test_different_seeds_differ():
    a = list(itertools.islice(ParkMiller(1 ^ 31), 10))
    b = list(itertools.islice(ParkMiller(1 ^ 7177), 10))
    assert a != b
    assert len(set(a)) == 10


def test_default_seed_is_one():
    assert ParkMiller().next() == do_rand(1)