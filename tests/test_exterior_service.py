from decimal import Decimal

import pytest

from tests.conftest import OWNER_ID


@pytest.fixture
def exterior(services):
    return services["exterior_service"]


def test_feature_requires_type_and_description(exterior, house):
    result = exterior.save_feature({"house_id": house["id"]}, OWNER_ID)

    assert result.status_code == 400
    assert set(result.field_errors) == {"feature_type", "description"}


def test_maintenance_type_must_be_listed(exterior, fake_supabase, house):
    result = exterior.add_maintenance(
        {
            "house_id": house["id"],
            "maintenance_type": "Chimney Sweep",
            "maintenance_date": "2023-10-01",
            "description": "Annual sweep",
        },
        OWNER_ID,
    )

    assert result.status_code == 400
    assert result.field_errors == {
        "maintenance_type": "Maintenance type must be one of the listed options"
    }
    assert fake_supabase.rows("exterior_maintenance") == []


def test_save_update_and_list_features(exterior, fake_supabase, house):
    created = exterior.save_feature(
        {"house_id": house["id"], "feature_type": "Deck", "description": "Cedar deck"},
        OWNER_ID,
    )
    assert created.success
    assert created.data.build_cost == Decimal("0")

    updated = exterior.save_feature(
        {"feature_type": "Deck", "description": "Cedar deck", "build_cost": "5000"},
        OWNER_ID,
        feature_id=created.data.id,
    )
    assert updated.success
    assert fake_supabase.row("exterior_features", created.data.id)["build_cost"] == "5000"


def test_maintenance_requires_type_date_and_description(exterior, house):
    result = exterior.add_maintenance({"house_id": house["id"], "cost": 10}, OWNER_ID)

    assert set(result.field_errors) == {
        "maintenance_type",
        "maintenance_date",
        "description",
    }


def test_list_orders_newest_first(exterior, house):
    for year in (2020, 2023, 2021):
        exterior.add_maintenance(
            {
                "house_id": house["id"],
                "maintenance_type": "Gutter Cleaning",
                "maintenance_date": f"{year}-04-01",
                "description": "Spring clean",
            },
            OWNER_ID,
        )
    for name in ("Shed", "Fence"):
        exterior.save_feature(
            {"house_id": house["id"], "feature_type": name, "description": name}, OWNER_ID
        )

    overview = exterior.list_exterior(house["id"], OWNER_ID).data

    assert [m.maintenance_date.year for m in overview.maintenance] == [2023, 2021, 2020]
    assert [str(f.feature_type) for f in overview.features] == ["Fence", "Shed"]


def test_delete_and_restore(exterior, fake_supabase, house):
    feature = fake_supabase.seed(
        "exterior_features", house_id=house["id"], feature_type="Pool", description="Pool"
    )
    record = fake_supabase.seed(
        "exterior_maintenance",
        house_id=house["id"],
        maintenance_type="Roofing",
        maintenance_date="2024-01-01",
        description="Roof",
    )

    assert exterior.delete_feature(feature["id"], OWNER_ID).success
    assert exterior.delete_maintenance(record["id"], OWNER_ID).success
    overview = exterior.list_exterior(house["id"], OWNER_ID).data
    assert overview.features == [] and overview.maintenance == []

    assert exterior.restore_feature(feature["id"], OWNER_ID).success
    assert exterior.restore_maintenance(record["id"], OWNER_ID).success
    overview = exterior.list_exterior(house["id"], OWNER_ID).data
    assert len(overview.features) == 1 and len(overview.maintenance) == 1
