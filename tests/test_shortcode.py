"""Tests for short code generation."""

import random

import pytest
from lib.common.validators import is_valid_short_code
from lib.shortcode import ShortCodeGenerator


class TestShortCodeGenerator:
    """Test short code generation."""

    def test_generate_random(self):
        """Test random code generation."""
        generator = ShortCodeGenerator(default_length=6)

        code = generator.generate_random()
        assert len(code) == 6
        assert code.isalnum()
        assert is_valid_short_code(code)[0]

    def test_generate_random_custom_length(self):
        """Test random code with custom length."""
        generator = ShortCodeGenerator(default_length=6)

        code = generator.generate_random(length=10)
        assert len(code) == 10
        assert is_valid_short_code(code)[0]

    @pytest.mark.parametrize("length", [3, 10])
    def test_generated_codes_pass_custom_code_rules(self, length):
        """Test generated codes of the boundary lengths satisfy the custom-code validator."""
        generator = ShortCodeGenerator(default_length=length, rng=random.Random(7))

        for _ in range(50):
            code = generator.generate_random()
            valid, message = is_valid_short_code(code)
            assert valid or "reserved" in message

    def test_seeded_generators_agree(self):
        """Test that a seeded random source makes codes reproducible."""
        first = ShortCodeGenerator(rng=random.Random(42))
        second = ShortCodeGenerator(rng=random.Random(42))

        assert [first.generate_random() for _ in range(5)] == [
            second.generate_random() for _ in range(5)
        ]

    @pytest.mark.parametrize("length", [0, 2, 11])
    def test_rejects_out_of_range_length(self, length):
        """Test default length bounds."""
        with pytest.raises(ValueError):
            ShortCodeGenerator(default_length=length)
