from datetime import datetime, timedelta

import numpy as np
import pytest

from config.config import ABTestConfig
from pricing.ab_testing import (
    ABTestSimulator,
    FixedTrafficSource,
    RandomTrafficSource,
    build_variant,
)

END = datetime(2024, 3, 12, 10, 0)


def simulator(a, b, **config):
    return ABTestSimulator(FixedTrafficSource({"A": a, "B": b}), ABTestConfig(**config))


def test_reference_ab_scenario(base_product):
    result = simulator((2000, 100), (2000, 80)).run(base_product, 50.0, 60.0, end_date=END)
    assert result.variant_a.revenue == pytest.approx(5000.0)
    assert result.variant_b.revenue == pytest.approx(4800.0)
    assert result.variant_a.conversion_rate == pytest.approx(5.0)
    assert result.variant_b.conversion_rate == pytest.approx(4.0)
    assert result.winner == "A"
    assert result.confidence == pytest.approx(10.0)
    assert result.recommendations == [
        "Implement Price A ($50.00) for higher revenue",
        "Revenue increase of $200.00 expected",
    ]


def test_winner_b_and_similar_rates_note(base_product):
    result = simulator((2000, 100), (2000, 95)).run(base_product, 50.0, 60.0, end_date=END)
    assert result.winner == "B"
    assert result.recommendations[0] == "Implement Price B ($60.00) for higher revenue"
    assert result.recommendations[1] == "Revenue increase of $700.00 expected"
    assert "Conversion rates are similar" in result.recommendations[2]


def test_revenue_tie_goes_to_b(base_product):
    result = simulator((1000, 60), (1000, 50)).run(base_product, 50.0, 60.0, end_date=END)
    assert result.variant_a.revenue == result.variant_b.revenue
    assert result.winner == "B"


def test_confidence_is_capped(base_product):
    result = simulator((1000, 100), (2000, 10)).run(base_product, 10.0, 10.0, end_date=END)
    assert result.confidence == 95.0


@pytest.mark.parametrize(
    "rate_a, rate_b, expected",
    [(5.0, 4.0, 10.0), (4.0, 5.0, 10.0), (3.0, 3.0, 0.0), (20.0, 1.0, 95.0)],
)
def test_confidence_formula(rate_a, rate_b, expected):
    assert ABTestSimulator(FixedTrafficSource({})).confidence(rate_a, rate_b) == pytest.approx(
        expected
    )


def test_confidence_grows_with_rate_gap():
    sim = ABTestSimulator(FixedTrafficSource({}))
    gaps = [0.0, 0.5, 1.0, 4.0, 9.0, 12.0]
    scores = [sim.confidence(5.0, 5.0 + gap) for gap in gaps]
    assert scores == sorted(scores)


def test_zero_views_gives_zero_rate():
    variant = build_variant(25.0, 0, 0)
    assert variant.conversion_rate == 0.0
    assert variant.revenue == 0.0


def test_test_window_dates(base_product):
    result = simulator((10, 1), (10, 1)).run(base_product, 5.0, 5.0, days=14, end_date=END)
    assert result.end_date == END
    assert result.start_date == END - timedelta(days=14)


def test_zero_day_test_is_allowed(base_product):
    result = simulator((10, 1), (10, 2)).run(base_product, 5.0, 5.0, days=0, end_date=END)
    assert result.start_date == result.end_date


def test_negative_days_rejected(base_product):
    with pytest.raises(ValueError, match="non-negative"):
        simulator((10, 1), (10, 1)).run(base_product, 5.0, 5.0, days=-1)


# --- Random traffic --- #


def test_random_source_is_reproducible_with_seed():
    first = RandomTrafficSource(seed=7)
    second = RandomTrafficSource(seed=7)
    assert [first.draw("A", 10.0, 7) for _ in range(5)] == [
        second.draw("A", 10.0, 7) for _ in range(5)
    ]


def test_random_source_respects_ranges():
    source = RandomTrafficSource((100, 110), (5, 8), rng=np.random.default_rng(3))
    for _ in range(50):
        views, conversions = source.draw("B", 10.0, 7)
        assert 100 <= views < 110
        assert 5 <= conversions < 8


def test_simulator_seeded_from_config(base_product):
    config = ABTestConfig(seed=42)
    first = ABTestSimulator(config=config).run(base_product, 50.0, 55.0, end_date=END)
    second = ABTestSimulator(config=config).run(base_product, 50.0, 55.0, end_date=END)
    assert first == second
    assert 1000 <= first.variant_a.views < 3000
    assert 50 <= first.variant_b.conversions < 200


def test_invalid_draw_ranges_rejected():
    with pytest.raises(ValueError, match="views_range"):
        ABTestConfig(views_range=(100, 100))


def test_random_source_caps_conversions_at_views():
    source = RandomTrafficSource((10, 20), (50, 60), rng=np.random.default_rng(5))
    for _ in range(20):
        views, conversions = source.draw("A", 10.0, 7)
        assert conversions == views
        assert build_variant(10.0, views, conversions).conversion_rate <= 100.0
