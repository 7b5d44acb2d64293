"""Tests for the uniform generator implementations."""

import random

import pytest

from parksim.prng.generators import (
    LCG_M,
    CongruentialGenerator,
    LinearCongruentialGenerator,
    MersenneTwisterGenerator,
    MixedCongruentialGenerator,
    SystemGenerator,
    UniformGenerator,
)


class TestLinearCongruentialGenerator:

    def test_first_output_for_seed_one(self):
        gen = LinearCongruentialGenerator(1)
        assert gen.next() == 1015568748 / 2**32
        assert gen.register == 1015568748

    def test_second_output_for_seed_one(self):
        gen = LinearCongruentialGenerator(1)
        gen.next()
        assert gen.next() == 1586005467 / 2**32

    def test_zero_seed_becomes_one(self):
        assert LinearCongruentialGenerator(0).register == 1

    def test_negative_and_fractional_seeds_are_coerced(self):
        assert LinearCongruentialGenerator(-7).register == 7
        assert LinearCongruentialGenerator(3.9).register == 3

    def test_outputs_in_unit_interval(self):
        gen = LinearCongruentialGenerator(42)
        for _ in range(1000):
            u = gen.next()
            assert 0.0 <= u < 1.0

    def test_state_round_trip_resumes_stream(self):
        gen = LinearCongruentialGenerator(99)
        gen.next()
        state = gen.get_state()
        expected = [gen.next() for _ in range(5)]

        gen.set_state(state)
        assert [gen.next() for _ in range(5)] == expected


class TestMixedCongruentialGenerator:

    def test_small_modulus_recurrence(self):
        gen = MixedCongruentialGenerator(a=69069, c=1, m=1000, seed=5)
        assert gen.next() == 346 / 1000

    def test_seed_reduced_modulo_m(self):
        gen = MixedCongruentialGenerator(a=3, c=1, m=10, seed=27)
        assert gen.register == 7

    def test_negative_seed_normalized_non_negative(self):
        gen = MixedCongruentialGenerator(a=3, c=1, m=10, seed=-3)
        assert gen.register == 7

    @pytest.mark.parametrize("m", [0, -5])
    def test_non_positive_modulus_falls_back(self, m):
        gen = MixedCongruentialGenerator(a=3, c=1, m=m, seed=1)
        assert gen.m == LCG_M

    def test_matches_lcg_with_lcg_constants(self):
        mcg = MixedCongruentialGenerator(1664525, 1013904223, 2**32, seed=17)
        lcg = LinearCongruentialGenerator(17)
        assert [mcg.next() for _ in range(10)] == [lcg.next() for _ in range(10)]

    def test_is_a_congruential_generator(self):
        assert isinstance(MixedCongruentialGenerator(1, 1, 7, 0), CongruentialGenerator)


class TestMersenneTwisterGenerator:

    def test_matches_stdlib_mt19937(self):
        gen = MersenneTwisterGenerator(2024)
        reference = random.Random(2024)
        assert [gen.next() for _ in range(5)] == [reference.random() for _ in range(5)]

    def test_state_round_trip(self):
        gen = MersenneTwisterGenerator(5)
        state = gen.get_state()
        first = gen.next()
        gen.set_state(state)
        assert gen.next() == first


class TestSystemGenerator:

    def test_outputs_in_unit_interval(self):
        gen = SystemGenerator()
        for _ in range(100):
            assert 0.0 <= gen.next() < 1.0

    def test_has_no_state(self):
        assert SystemGenerator().get_state() is None


def test_all_generators_satisfy_protocol():
    for gen in (
        SystemGenerator(),
        LinearCongruentialGenerator(1),
        MixedCongruentialGenerator(3, 1, 10, 1),
        MersenneTwisterGenerator(1),
    ):
        assert isinstance(gen, UniformGenerator)
