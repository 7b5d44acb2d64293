"""Tests for PrngProvider method switching and snapshot/restore."""

import logging

import pytest

from parksim.prng.provider import McgConfig, PrngMethod, PrngProvider, PrngSnapshot


class TestPrngMethodParse:

    @pytest.mark.parametrize(
        "label, expected",
        [
            ("lcg", PrngMethod.LCG),
            ("LCG", PrngMethod.LCG),
            ("MixedCongruential", PrngMethod.MCG),
            ("mcg", PrngMethod.MCG),
            ("Mersenne-Twister", PrngMethod.MERSENNE_TWISTER),
            ("mersenne_twister", PrngMethod.MERSENNE_TWISTER),
            ("Math.random", PrngMethod.SYSTEM),
            ("system", PrngMethod.SYSTEM),
        ],
    )
    def test_accepts_known_labels(self, label, expected):
        assert PrngMethod.parse(label) is expected

    def test_rejects_unknown_label(self):
        with pytest.raises(ValueError):
            PrngMethod.parse("xorshift")


class TestPrngProvider:

    def test_same_seed_same_sequence(self):
        for method in (PrngMethod.LCG, PrngMethod.MCG, PrngMethod.MERSENNE_TWISTER):
            a = PrngProvider(method, seed=7)
            b = PrngProvider(method, seed=7)
            assert [a.next() for _ in range(20)] == [b.next() for _ in range(20)]

    def test_set_discards_previous_state(self):
        provider = PrngProvider(PrngMethod.LCG, seed=1)
        provider.next()
        provider.next()
        provider.set(PrngMethod.LCG, seed=1)
        assert provider.next() == 1015568748 / 2**32

    def test_mcg_uses_default_config_when_missing(self):
        provider = PrngProvider(PrngMethod.MCG, seed=3)
        assert provider.config == McgConfig()

    def test_mcg_config_with_bad_modulus_is_normalized(self):
        provider = PrngProvider(PrngMethod.MCG, seed=3, config=McgConfig(a=5, c=3, m=0))
        assert provider.config.m == 2**32

    def test_non_mcg_methods_drop_config(self):
        provider = PrngProvider(PrngMethod.LCG, seed=3, config=McgConfig(a=5, c=3, m=16))
        assert provider.config is None

    def test_system_method_has_no_seed(self):
        provider = PrngProvider(PrngMethod.SYSTEM, seed=99)
        assert provider.seed is None

    def test_missing_seed_logs_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="parksim"):
            provider = PrngProvider(PrngMethod.LCG)
        assert provider.seed is not None
        assert "time-based seed" in caplog.text


class TestSnapshotRestore:

    @pytest.mark.parametrize(
        "method, config",
        [
            (PrngMethod.LCG, None),
            (PrngMethod.MCG, McgConfig(a=69069, c=1, m=2**31)),
            (PrngMethod.MERSENNE_TWISTER, None),
        ],
    )
    def test_restore_resumes_mid_stream(self, method, config):
        provider = PrngProvider(method, seed=11, config=config)
        for _ in range(3):
            provider.next()
        snap = provider.snapshot()
        expected = [provider.next() for _ in range(5)]

        provider.set(PrngMethod.LCG, seed=999)
        provider.next()
        provider.restore(snap)

        assert [provider.next() for _ in range(5)] == expected

    def test_restore_brings_back_mcg_parameters(self):
        config = McgConfig(a=69069, c=1, m=2**31)
        provider = PrngProvider(PrngMethod.MCG, seed=4, config=config)
        snap = provider.snapshot()

        provider.set(PrngMethod.MCG, seed=4, config=McgConfig(a=3, c=1, m=10))
        provider.restore(snap)

        assert provider.method is PrngMethod.MCG
        assert provider.config == config
        assert provider.seed == 4

    def test_snapshot_is_frozen(self):
        snap = PrngProvider(PrngMethod.LCG, seed=1).snapshot()
        assert isinstance(snap, PrngSnapshot)
        with pytest.raises(AttributeError):
            snap.seed = 5
