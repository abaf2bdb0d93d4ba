from decimal import Decimal
from itertools import permutations

from house_notes.models.cost_models import CostBreakdown
from house_notes.models.house import House
from house_notes.services.house_lifecycle import compute_lifecycle, years_owned

BREAKDOWN = CostBreakdown(
    house_purchase=Decimal("300000"),
    appliances=Decimal("1200"),
    appliance_installation=Decimal("300"),
    appliance_repairs=Decimal("150"),
    exterior_features=Decimal("5000"),
    exterior_maintenance=Decimal("800"),
)


def test_total_cost_is_sum_of_components():
    assert BREAKDOWN.total_cost == Decimal("307450")


def test_total_cost_ignores_which_component_holds_which_amount():
    fields = list(CostBreakdown.model_fields)
    amounts = [Decimal(v) for v in ("250000.10", "0", "1999.99", "0.01", "75", "12345.67")]
    expected = sum(amounts, Decimal("0"))

    for ordering in permutations(amounts):
        assert CostBreakdown(**dict(zip(fields, ordering))).total_cost == expected


def test_years_owned_variants():
    assert years_owned(2010, 2020, 2030) == 10
    assert years_owned(2010, None, 2024) == 14
    assert years_owned(None, 2020, 2024) is None


def test_unsold_house_has_no_profit():
    lifecycle = compute_lifecycle(House(year_bought=2014), BREAKDOWN, current_year=2024)
    assert lifecycle.profit is None
    assert lifecycle.years_owned == 10
    assert lifecycle.cost_per_year == Decimal("30745")


def test_sold_house_profit_may_be_negative():
    house = House(year_bought=2014, year_sold=2024, price_sold=Decimal("250000"))
    lifecycle = compute_lifecycle(house, BREAKDOWN)
    assert lifecycle.profit == Decimal("-57450")


def test_sale_price_of_zero_still_yields_profit():
    house = House(year_bought=2014, year_sold=2024, price_sold=Decimal("0"))
    assert compute_lifecycle(house, BREAKDOWN).profit == Decimal("-307450")


def test_no_cost_per_year_for_zero_or_negative_ownership():
    same_year = House(year_bought=2024, year_sold=2024)
    assert compute_lifecycle(same_year, BREAKDOWN).cost_per_year is None

    backwards = House(year_bought=2024, year_sold=2020)
    lifecycle = compute_lifecycle(backwards, BREAKDOWN)
    assert lifecycle.years_owned == -4
    assert lifecycle.cost_per_year is None


def test_no_purchase_year_means_no_duration():
    lifecycle = compute_lifecycle(House(), BREAKDOWN, current_year=2024)
    assert lifecycle.years_owned is None
    assert lifecycle.cost_per_year is None
