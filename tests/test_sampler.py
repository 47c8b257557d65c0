import numpy as np
import pytest

from color_mapper.catalog import HUES
from color_mapper.gamut import is_displayable, max_chroma
from color_mapper.sampler import ZONES, ColorSampler, generate_random_color, pick_zone


def test_zone_weights_sum_to_one():
    assert sum(z.weight for z in ZONES) == pytest.approx(1.0)


def test_pick_zone_by_cumulative_weight():
    assert pick_zone(0.0).name == "pale"
    assert pick_zone(0.10).name == "pale"
    assert pick_zone(0.17).name == "dark"
    assert pick_zone(0.50).name == "gray"
    assert pick_zone(0.90).name == "vivid"
    assert pick_zone(0.9999).name == "vivid"


def test_random_colors_are_always_displayable():
    rng = np.random.default_rng(1234)
    for _ in range(10_000):
        col = generate_random_color(25, rng)
        assert col.h == 25
        assert col.c <= max_chroma(col.l, 25)
        assert is_displayable(col.l, col.c, col.h)


@pytest.mark.parametrize("hue", HUES, ids=lambda h: h.id)
def test_retry_cap_never_exhausted(hue):
    sampler = ColorSampler(rng=np.random.default_rng(hue.angle))
    for zone in ZONES:
        for _ in range(40):
            s = sampler.sample_zone(zone, hue.angle)
            assert not s.fell_back
            lo, hi = zone.l_range
            assert lo <= s.color.l <= hi


def test_fallback_point_without_retries():
    sampler = ColorSampler(rng=np.random.default_rng(0), max_tries=0)
    s = sampler.sample_zone(ZONES[0], 245)
    assert s.fell_back
    assert (s.color.l, s.color.c, s.color.h) == (0.95, 0.02, 245)


def test_pale_zone_frequency():
    sampler = ColorSampler(rng=np.random.default_rng(7))
    samples = [sampler.sample(25) for _ in range(1000)]
    pale = sum(s.zone.name == "pale" for s in samples) / len(samples)
    assert pale == pytest.approx(0.14, abs=0.04)
    # other zones also reach above 0.85, so the bright share can only be larger
    bright = sum(s.color.l > 0.85 for s in samples) / len(samples)
    assert bright >= pale


def test_rejection_sampling_does_not_hug_the_edge():
    # clamping to the boundary would pile points onto c == max_chroma
    sampler = ColorSampler(rng=np.random.default_rng(99))
    vivid = ZONES[3]
    near_edge = 0
    n = 2000
    for _ in range(n):
        col = sampler.sample_zone(vivid, 25).color
        if col.c > 0.98 * max_chroma(col.l, 25):
            near_edge += 1
    assert near_edge / n < 0.10
