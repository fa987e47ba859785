"""Tests for the seasnap.classify module."""

import re

import pytest

from seasnap.classify import RGBA, ClassifiedBand, classify, color_for, normalize
from seasnap.contours import extract
from seasnap.geomapper import to_geographic


class TestNormalize:
    """Tests for the normalize function."""

    def test_reversed_domain(self):
        """The first domain entry maps to 0, the second to 1."""
        assert normalize(10.0, (10.0, 0.0)) == 0.0
        assert normalize(0.0, (10.0, 0.0)) == 1.0
        assert normalize(2.5, (10.0, 0.0)) == pytest.approx(0.75)

    def test_clips_outside_domain(self):
        """Values outside the domain clamp to the ends."""
        assert normalize(20.0, (10.0, 0.0)) == 0.0
        assert normalize(-5.0, (10.0, 0.0)) == 1.0

    def test_degenerate_domain(self):
        """A zero-width domain maps everything to 0."""
        assert normalize(3.0, (3.0, 3.0)) == 0.0


class TestColorFor:
    """Tests for the color_for function."""

    def test_is_deterministic(self):
        """The same value and domain always give the same color."""
        assert color_for(4.2, (10.0, 0.0)) == color_for(4.2, (10.0, 0.0))

    def test_high_values_red_low_values_blue(self):
        """The maximum is red, the minimum is blue."""
        high = color_for(10.0, (10.0, 0.0))
        low = color_for(0.0, (10.0, 0.0))
        assert high.r > high.b
        assert low.b > low.r

    def test_clipped_values_share_end_colors(self):
        """Out-of-domain values take the color of the nearest end."""
        assert color_for(99.0, (10.0, 0.0)) == color_for(10.0, (10.0, 0.0))
        assert color_for(-99.0, (10.0, 0.0)) == color_for(0.0, (10.0, 0.0))

    def test_degenerate_domain_is_start_color(self):
        """A flat domain classifies everything as the start color."""
        assert color_for(5.0, (5.0, 5.0)) == color_for(10.0, (10.0, 0.0))

    def test_returns_opaque_rgba(self):
        """Colors are 8-bit and fully opaque."""
        color = color_for(3.0, (10.0, 0.0))
        assert isinstance(color, RGBA)
        assert all(0 <= c <= 255 for c in color)
        assert color.a == 255
        assert color.opacity == 1.0

    def test_hex(self):
        """The hex form is a CSS #rrggbb string."""
        assert RGBA(255, 0, 16).hex == "#ff0010"
        assert re.fullmatch(r"#[0-9a-f]{6}", color_for(1.0, (10.0, 0.0)).hex)

    def test_other_colormap(self):
        """A different colormap name gives different colors."""
        assert (color_for(0.0, (10.0, 0.0), cmap="viridis")
                != color_for(0.0, (10.0, 0.0)))

    def test_unknown_colormap(self):
        """Unknown colormap names raise KeyError."""
        with pytest.raises(KeyError):
            color_for(0.0, (10.0, 0.0), cmap="no-such-map")


class TestClassify:
    """Tests for the classify function."""

    def test_pairs_bands_and_geometries(self, wave_field):
        """Every band keeps its value and polygons and gets a color."""
        bands = extract(wave_field, [2.0, 5.0, 9.5])
        geometries = [to_geographic(b.polygons, wave_field.bbox, wave_field.shape)
                      for b in bands]
        classified = classify(bands, geometries, (9.0, 0.0))
        assert len(classified) == 3
        assert all(isinstance(band, ClassifiedBand) for band in classified)
        assert [band.value for band in classified] == [2.0, 5.0, 9.5]
        assert classified[0].color == color_for(2.0, (9.0, 0.0))
        assert not classified[0].is_empty
        assert classified[2].is_empty
        assert classified[2].geometry == ()
