import pytest

from tests.conftest import OWNER_ID, STRANGER_ID


@pytest.fixture
def houses(services):
    return services["house_service"]


def test_get_current_house_none_when_absent(houses):
    result = houses.get_current_house(OWNER_ID)

    assert result.success
    assert result.data is None


def test_create_house_with_property_details(houses, fake_supabase):
    result = houses.save_house(
        {
            "year_bought": 2018,
            "price_paid": "425000",
            "country": "Other",
            "country_other": "Ireland",
        },
        OWNER_ID,
        property_details={"acreage": "0.25", "story": "2", "house_color": "#112233"},
    )

    assert result.success, result.error
    (house_row,) = fake_supabase.rows("houses")
    assert house_row["user_id"] == OWNER_ID
    assert (house_row["country"], house_row["country_other"]) == ("Other", "Ireland")
    (details_row,) = fake_supabase.rows("property_details")
    assert details_row["house_id"] == house_row["id"]
    assert details_row["sewage_type"] == "municipal"
    assert result.data.property_details.house_color == "#112233"


def test_save_without_id_updates_existing_house(houses, fake_supabase, house):
    result = houses.save_house({"year_bought": 2015, "city": "Springfield"}, OWNER_ID)

    assert result.success
    assert len(fake_supabase.rows("houses")) == 1
    assert fake_supabase.row("houses", house["id"])["city"] == "Springfield"


def test_year_validation(houses, fake_supabase):
    result = houses.save_house({"year_bought": 2020, "year_sold": 2019, "year_built": 99}, OWNER_ID)

    assert result.status_code == 400
    assert result.field_errors == {
        "year_built": "Year built must be a four-digit year",
        "year_sold": "Year sold cannot be before year bought",
    }
    assert fake_supabase.rows("houses") == []


def test_negative_price_rejected(houses):
    result = houses.save_house({"price_paid": "-5"}, OWNER_ID)

    assert result.status_code == 400
    assert "price_paid" in result.field_errors


def test_other_property_choice_requires_text(houses, house):
    result = houses.save_property_details(
        house["id"], {"build_style": "Other", "build_style_other": ""}, OWNER_ID
    )

    assert result.field_errors == {"build_style": "Please specify the build style"}


def test_property_details_upsert_replaces_row(houses, fake_supabase, house):
    houses.save_property_details(house["id"], {"acreage": "1"}, OWNER_ID)
    houses.save_property_details(house["id"], {"acreage": "2", "sewage_type": "septic"}, OWNER_ID)

    (row,) = fake_supabase.rows("property_details")
    assert row["acreage"] == "2"
    assert row["sewage_type"] == "septic"


def test_house_details_loads_rooms_and_details(houses, fake_supabase, house):
    fake_supabase.seed("rooms", house_id=house["id"], room_type="Bedroom", count="2")
    fake_supabase.seed("property_details", house_id=house["id"], acreage="0.5")

    result = houses.get_house_details(house["id"], OWNER_ID)

    assert result.success
    assert [room.label for room in result.data.rooms] == ["Bedrooms"]
    assert str(result.data.property_details.acreage) == "0.5"


def test_house_details_of_stranger_is_forbidden(houses, house):
    assert houses.get_house_details(house["id"], STRANGER_ID).status_code == 403


def test_delete_and_restore_house(houses, fake_supabase, house):
    deleted = houses.delete_house(house["id"], OWNER_ID)
    assert deleted.success
    assert houses.get_current_house(OWNER_ID).data is None

    restored = houses.restore_house(house["id"], OWNER_ID)
    assert restored.success
    assert houses.get_current_house(OWNER_ID).data.id == house["id"]


def test_mutations_are_audited(houses, db, house):
    houses.delete_house(house["id"], OWNER_ID)

    rows = db.sqlite.execute(
        "SELECT action, entity_type, entity_id, user_id FROM audit_log"
    ).fetchall()
    assert [tuple(row) for row in rows] == [("SOFT_DELETE", "houses", house["id"], OWNER_ID)]


def test_retrieval_failure_is_reported(houses, fake_supabase):
    fake_supabase.fail("houses")

    result = houses.get_current_house(OWNER_ID)

    assert not result.success
    assert result.status_code == 503
    assert result.data is None
