import pytest

from pellet_tool.engine import PricingEngine, PricingTier, QuoteRequest, TierMatcher, UnknownUnitError


@pytest.fixture
def engine(settings):
    return PricingEngine(settings)


def test_missing_tier_file_uses_defaults(engine):
    """No pricing_tiers.csv falls back to the built-in STANDARD/BULK table."""
    labels = [t.label for t in engine.tier_matcher.tiers]
    assert labels == ["STANDARD", "BULK"]


def test_quote_ten_acres_with_delivery(engine):
    result = engine.calculate(QuoteRequest(area=10, unit="acre", one_way_km=80, destination="Olds, AB"))

    assert result.acres == 10
    assert result.product_lbs == 15_000
    assert result.tier == "STANDARD"
    assert result.price_per_lb == 1.75
    assert result.product_cost == pytest.approx(26_250.00)
    assert result.bags == 15
    assert result.delivery.round_trip_hours == 2
    assert result.delivery.cost == 300.0
    assert result.total == pytest.approx(26_550.00)
    assert result.destination == "Olds, AB"
    assert result.warnings == []


def test_quote_without_distance_has_no_delivery(engine):
    result = engine.calculate(QuoteRequest(area=4046.8564224, unit="sqm"))
    assert result.delivery is None
    assert result.acres == pytest.approx(1.0)
    assert result.total == pytest.approx(result.product_cost)
    assert "delivery not included" in result.get_trace_text()


def test_bulk_tier_selected_from_product_weight(engine):
    """The tier follows computed pounds: 40 ac × 1500 = 60,000 lbs → BULK."""
    result = engine.calculate(QuoteRequest(area=40, unit="acre"))
    assert result.product_lbs == 60_000
    assert result.tier == "BULK"
    assert result.product_cost == pytest.approx(60_000 * 1.60)


def test_quote_unknown_unit_raises(engine):
    with pytest.raises(UnknownUnitError):
        engine.calculate(QuoteRequest(area=10, unit="furlong"))


def test_zero_area_warns(engine):
    result = engine.calculate(QuoteRequest(area=0))
    assert result.bags == 0
    assert result.total == 0
    assert result.warnings


def test_trace_records_each_step(engine):
    result = engine.calculate(QuoteRequest(area=10, one_way_km=80))
    steps = [t.step for t in result.trace]
    assert steps == ["Area", "Product", "Tier", "Product Cost", "Packaging", "Delivery", "Total"]
    assert result.trace[-1].value == "$26,550.00"


def test_custom_tier_table(settings):
    tiers = TierMatcher([
        PricingTier("STANDARD", 0, 2.00),
        PricingTier("VOLUME", 10_000, 1.50),
    ])
    engine = PricingEngine(settings, tiers=tiers)
    result = engine.calculate(QuoteRequest(area=10))
    assert result.tier == "VOLUME"
    assert result.product_cost == pytest.approx(22_500.00)


def test_reload_data_reads_csv(settings):
    engine = PricingEngine(settings)
    settings.pricing_tiers.write_text("label,threshold_lbs,price_per_lb\nFLAT,0,1.25\n")
    engine.reload_data()
    assert [t.label for t in engine.tier_matcher.tiers] == ["FLAT"]
