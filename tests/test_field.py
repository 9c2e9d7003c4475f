"""Tests for the glyph field: grid, stars, ripples and glyph/alpha mapping."""

import numpy as np
import pytest

from glyphdeck.field import compose_frame, grid_shape, regenerate_star_mask, star_sample_count
from glyphdeck.field.compose import (
    FIELD_GLYPHS,
    STAR_GLYPHS,
    select_alpha,
    select_glyphs,
    squash,
    tint_for,
)
from glyphdeck.field.noise import base_field, normalized_coordinates
from glyphdeck.field.waves import ripple_contribution, superpose, temporal_decay
from glyphdeck.model.state import Ripple

FIELD_TINT = (184, 198, 224)
STAR_TINT = (220, 233, 255)


def make_ripple(x=500.0, y=400.0, start=0.0, duration=2.6, strength=0.65):
    return Ripple(x=x, y=y, start_time=start, duration=duration, angular_speed=7.1, strength=strength)


class TestGridShape:
    def test_rounds_up(self):
        shape = grid_shape(1000, 800, 18)
        assert (shape.cols, shape.rows) == (56, 45)

    def test_exact_multiple(self):
        shape = grid_shape(180, 90, 18)
        assert (shape.cols, shape.rows) == (10, 5)

    def test_zero_viewport_is_empty(self):
        assert grid_shape(0, 500, 18).is_empty

    def test_normalized_coordinates_in_range(self):
        nx, ny = normalized_coordinates(grid_shape(1000, 800, 18))
        assert nx.shape == (1, 56)
        assert ny.shape == (45, 1)
        assert nx.min() == pytest.approx(-0.5)
        assert nx.max() <= 0.5
        assert ny.max() <= 0.5


class TestStarMask:
    @pytest.mark.parametrize("cols,rows", [(56, 45), (3, 2), (1, 1), (200, 120)])
    def test_mask_size_matches_grid(self, cols, rows):
        mask = regenerate_star_mask(cols, rows, rng=np.random.default_rng(1))
        assert mask.shape == (cols * rows,)
        assert mask.dtype == bool

    def test_sample_count_has_fixed_minimum(self):
        assert star_sample_count(6) == 80
        assert star_sample_count(0) == 80
        assert star_sample_count(100_000) == 1200

    def test_small_grid_tolerates_collisions(self):
        # 80 draws into 6 cells: duplicates are kept, not redrawn
        mask = regenerate_star_mask(3, 2, rng=np.random.default_rng(7))
        assert 1 <= mask.sum() <= 6

    def test_density_is_upper_bound_of_distinct_stars(self):
        mask = regenerate_star_mask(200, 120, rng=np.random.default_rng(3))
        assert mask.sum() <= star_sample_count(200 * 120)
        assert mask.sum() > 0

    def test_empty_grid(self):
        assert regenerate_star_mask(0, 10).size == 0


class TestRipples:
    def test_temporal_decay_is_linear(self):
        ripple = make_ripple(duration=2.0)
        assert temporal_decay(ripple, 0.0) == pytest.approx(1.0)
        assert temporal_decay(ripple, 1.0) == pytest.approx(0.5)
        assert temporal_decay(ripple, 2.0) == pytest.approx(0.0)

    def test_zero_contribution_after_duration(self):
        shape = grid_shape(1000, 800, 18)
        ripple = make_ripple()
        assert np.all(ripple_contribution(shape, ripple, now=2.7) == 0.0)
        assert np.all(ripple_contribution(shape, ripple, now=50.0) == 0.0)

    def test_contribution_decays_with_distance(self):
        shape = grid_shape(2000, 18, 18)
        ripple = make_ripple(x=9.0, y=9.0, strength=1.0)
        contribution = ripple_contribution(shape, ripple, now=0.0)
        # Last cell centre sits 1998 px from the origin
        envelope = 0.2 * np.exp(-1998.0 * 0.001)
        assert abs(contribution[0, -1]) <= envelope + 1e-12
        assert abs(contribution[0, 0]) == pytest.approx(0.0)

    def test_superposition_is_a_sum(self):
        shape = grid_shape(300, 200, 18)
        a = make_ripple(x=50.0, y=50.0)
        b = make_ripple(x=250.0, y=150.0, start=0.5)
        total = superpose(shape, [a, b], now=1.0)
        expected = ripple_contribution(shape, a, 1.0) + ripple_contribution(shape, b, 1.0)
        np.testing.assert_allclose(total, expected)

    def test_no_ripples_means_zero(self):
        shape = grid_shape(300, 200, 18)
        assert not superpose(shape, [], now=0.0).any()


class TestGlyphMapping:
    def test_squash_range(self):
        values = np.linspace(-50, 50, 1001)
        out = squash(values)
        assert out.min() >= 0.0
        assert out.max() <= 1.0

    def test_field_ramp_ends(self):
        normalized = np.array([0.0, 1.0])
        star = np.array([False, False])
        assert list(select_glyphs(normalized, star)) == [FIELD_GLYPHS[0], FIELD_GLYPHS[-1]]

    def test_stars_are_never_blank(self):
        normalized = np.linspace(0.0, 1.0, 50)
        star = np.ones(50, dtype=bool)
        glyphs = select_glyphs(normalized, star)
        assert " " not in set(glyphs.tolist())
        assert set(glyphs.tolist()) <= set(STAR_GLYPHS[3:])

    def test_rounding_is_half_up(self):
        # 0.375 * 12 = 4.5 exactly, which must round up to 5
        normalized = np.array([0.5, 0.375])
        star = np.zeros(2, dtype=bool)
        assert list(select_glyphs(normalized, star)) == [FIELD_GLYPHS[6], FIELD_GLYPHS[5]]

    def test_alpha_floors(self):
        normalized = np.array([0.0, 0.0, 1.0, 1.0])
        star = np.array([False, True, False, True])
        alpha = select_alpha(normalized, star)
        assert alpha[0] == pytest.approx(0.18)
        assert alpha[1] == pytest.approx(0.6)
        assert alpha[2] == pytest.approx(0.53)
        assert alpha[3] == pytest.approx(0.85)

    def test_tint_fallback(self):
        tints = {"tech": (1, 2, 3)}
        assert tint_for("tech", tints, FIELD_TINT) == (1, 2, 3)
        assert tint_for("unknown", tints, FIELD_TINT) == FIELD_TINT
        assert tint_for(None, tints, FIELD_TINT) == FIELD_TINT


class TestComposeFrame:
    def test_frame_covers_grid(self):
        shape = grid_shape(1000, 800, 18)
        mask = regenerate_star_mask(shape.cols, shape.rows, rng=np.random.default_rng(0))
        frame = compose_frame(shape, 1.5, mask, [make_ripple()], 1.0, FIELD_TINT, STAR_TINT)

        assert frame.glyphs.shape == (45, 56)
        assert frame.alpha.shape == (45, 56)
        assert frame.values.min() >= 0.0
        assert frame.values.max() <= 1.0
        np.testing.assert_array_equal(frame.star, mask.reshape(45, 56))

    def test_star_cells_use_star_tint(self):
        shape = grid_shape(36, 18, 18)
        mask = np.array([True, False])
        frame = compose_frame(shape, 0.0, mask, [], 0.0, FIELD_TINT, STAR_TINT)
        assert frame.color_at(0, 0)[:3] == STAR_TINT
        assert frame.color_at(0, 1)[:3] == FIELD_TINT

    def test_expired_ripple_leaves_field_untouched(self):
        shape = grid_shape(300, 200, 18)
        mask = np.zeros(shape.total, dtype=bool)
        plain = compose_frame(shape, 2.0, mask, [], 10.0, FIELD_TINT, STAR_TINT)
        expired = compose_frame(shape, 2.0, mask, [make_ripple(start=0.0)], 10.0, FIELD_TINT, STAR_TINT)
        np.testing.assert_array_equal(plain.values, expired.values)

    def test_live_ripple_changes_field(self):
        shape = grid_shape(300, 200, 18)
        mask = np.zeros(shape.total, dtype=bool)
        plain = compose_frame(shape, 2.0, mask, [], 1.0, FIELD_TINT, STAR_TINT)
        rippled = compose_frame(shape, 2.0, mask, [make_ripple(x=150, y=100)], 1.0, FIELD_TINT, STAR_TINT)
        assert not np.allclose(plain.values, rippled.values)

    def test_stale_mask_draws_no_stars(self):
        shape = grid_shape(300, 200, 18)
        frame = compose_frame(shape, 0.0, np.ones(7, dtype=bool), [], 0.0, FIELD_TINT, STAR_TINT)
        assert not frame.star.any()

    def test_empty_grid(self):
        shape = grid_shape(0, 0, 18)
        frame = compose_frame(shape, 0.0, np.zeros(0, dtype=bool), [], 0.0, FIELD_TINT, STAR_TINT)
        assert frame.glyphs.size == 0
        assert frame.visible_cells()[0].size == 0

    def test_base_field_is_time_varying(self):
        shape = grid_shape(300, 200, 18)
        assert not np.allclose(base_field(shape, 0.0), base_field(shape, 3.0))
