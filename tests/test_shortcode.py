"""Tests for short code generation."""

import pytest

from shortener.shortcode import ShortCodeGenerator
from shortener.common.validators import is_valid_short_code


class TestShortCodeGenerator:
    """Test short code generation."""

    def test_generate_random(self):
        """Test random code generation."""
        generator = ShortCodeGenerator(default_length=6)

        code = generator.generate_random()
        assert len(code) == 6
        assert is_valid_short_code(code)

    @pytest.mark.parametrize("length", [3, 10, 20])
    def test_generate_random_custom_length(self, length):
        """Test random code with custom length."""
        code = ShortCodeGenerator().generate_random(length=length)

        assert len(code) == length
        assert is_valid_short_code(code)

    def test_generate_random_varies(self):
        """Codes are drawn from a large space, so repeats are rare."""
        generator = ShortCodeGenerator(default_length=6)

        codes = {generator.generate_random() for _ in range(200)}
        assert len(codes) > 190
        assert all(is_valid_short_code(code) for code in codes)

    @pytest.mark.parametrize("length", [0, 2, 21])
    def test_length_outside_shortcode_rule(self, length):
        with pytest.raises(ValueError):
            ShortCodeGenerator(default_length=length)
        with pytest.raises(ValueError):
            ShortCodeGenerator().generate_random(length=length)
