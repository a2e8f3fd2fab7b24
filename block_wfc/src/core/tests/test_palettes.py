"""
Tests for core/palettes.py - Preset block palettes.
"""

import pytest

from block_wfc.src.core.palettes import (
    PALETTES,
    get_palette,
    lego_palette,
    semiconductor_palette,
    walls_palette,
)


class TestPalettes:
    """Tests for the preset palettes."""

    def test_lego_palette(self):
        palette = lego_palette()
        assert len(palette) == 4
        assert {block.symbol() for block in palette} == {"#", "_", "D", "W"}

    def test_walls_palette(self):
        assert {block.symbol() for block in walls_palette()} == {"#", "W", "D", "^"}

    def test_semiconductor_palette(self):
        assert {block.symbol() for block in semiconductor_palette()} == {"B", "T", "H"}

    @pytest.mark.parametrize("name", sorted(PALETTES))
    def test_every_block_connects_to_some_block(self, name):
        """Each block can bond with at least one block of its palette."""
        palette = get_palette(name)
        for block in palette:
            assert any(
                block.can_connect_to(other, mine, theirs)
                for other in palette
                for mine in block.faces()
                for theirs in other.faces()
            )

    def test_positive_weights(self):
        for factory in PALETTES.values():
            assert all(block.ranking() > 0 for block in factory())


class TestGetPalette:
    """Tests for get_palette lookup."""

    def test_case_insensitive(self):
        assert get_palette("LEGO") == lego_palette()

    def test_unknown_palette(self):
        with pytest.raises(ValueError, match="Unknown palette"):
            get_palette("marble")
