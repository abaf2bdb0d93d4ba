import threading
from decimal import Decimal

import pytest

from house_notes.models.cost_models import CostBreakdown
from house_notes.models.house import House
from house_notes.models.service_models import ServiceResult
from house_notes.services.dashboard_service import DashboardLoader, DashboardService
from tests.conftest import OWNER_ID


BREAKDOWN = CostBreakdown(
    house_purchase=Decimal("300000"),
    appliances=Decimal("1200"),
    appliance_installation=Decimal("300"),
    appliance_repairs=Decimal("150"),
    exterior_features=Decimal("5000"),
    exterior_maintenance=Decimal("800"),
)


def test_summary_formats_every_figure():
    house = House(id="h1", year_bought=2014, country="Canada")

    summary = DashboardService.build_summary(house, BREAKDOWN, current_year=2024)

    assert summary.currency_code == "CAD"
    assert [line.label for line in summary.lines] == [
        "Price Paid",
        "Interior Appliances",
        "Appliance Installation",
        "Appliance Repairs",
        "Exterior Features",
        "Exterior Maintenance",
    ]
    assert summary.lines[0].display == "$300,000.00"
    assert summary.total_display == "$307,450.00"
    assert summary.years_owned == 10
    assert summary.cost_per_year_display == "$30,745"
    assert summary.profit_label is None
    assert summary.profit_display is None


def test_loss_is_shown_as_absolute_amount():
    house = House(
        id="h1",
        year_bought=2014,
        year_sold=2024,
        price_sold=Decimal("250000"),
        country="United Kingdom",
    )

    summary = DashboardService.build_summary(house, BREAKDOWN)

    assert summary.profit_label == "Loss"
    assert summary.profit_display == "£57,450.00"
    assert summary.price_sold_display == "£250,000.00"


def test_load_summary_reports_failure_without_data(services, fake_supabase, house):
    fake_supabase.fail("interior_appliances")

    result = services["dashboard_service"].load_summary(house["id"], OWNER_ID, 2024)

    assert not result.success
    assert result.data is None


def test_load_summary_success(services, house):
    result = services["dashboard_service"].load_summary(house["id"], OWNER_ID, 2024)

    assert result.success
    assert result.data.total_display == "$300,000.00"
    assert result.data.years_owned == 9


class BlockingService:
    """Returns a canned result once released; records call order."""

    def __init__(self):
        self.gates = {}

    def load_summary(self, house_id, user_id, current_year=None):
        self.gates.setdefault(house_id, threading.Event()).wait(timeout=5)
        return ServiceResult(success=True, data=house_id)

    def release(self, house_id):
        self.gates.setdefault(house_id, threading.Event()).set()


@pytest.fixture
def blocking():
    return BlockingService()


def test_only_latest_request_is_delivered(blocking, logger):
    delivered = []
    loader = DashboardLoader(blocking, delivered.append, logger)

    loader.request("old-house", OWNER_ID)
    loader.request("new-house", OWNER_ID)
    blocking.release("new-house")
    blocking.release("old-house")
    loader.wait(timeout=5)

    assert [result.data for result in delivered] == ["new-house"]


def test_nothing_delivered_after_detach(blocking, logger):
    delivered = []
    loader = DashboardLoader(blocking, delivered.append, logger)

    loader.request("house", OWNER_ID)
    loader.detach()
    blocking.release("house")
    loader.wait(timeout=5)

    assert delivered == []
    assert not loader.is_attached
    with pytest.raises(RuntimeError):
        loader.request("house", OWNER_ID)


def test_cancel_discards_in_flight_result(blocking, logger):
    delivered = []
    loader = DashboardLoader(blocking, delivered.append, logger)

    first = loader.request("house", OWNER_ID)
    loader.cancel()
    blocking.release("house")
    loader.wait(timeout=5)

    assert delivered == []
    assert loader.generation > first
