from decimal import Decimal

import pytest

from house_notes.models.service_models import AttachmentUpload
from tests.conftest import OWNER_ID, STRANGER_ID, FakeAPIError


@pytest.fixture
def appliances(services):
    return services["appliance_service"]


@pytest.fixture
def appliance(fake_supabase, house):
    return fake_supabase.seed(
        "interior_appliances",
        house_id=house["id"],
        appliance_type="Dishwasher",
        purchase_cost="600",
        installation_cost="100",
    )


def upload(name="manual.pdf"):
    return AttachmentUpload(
        file_name=name,
        file_url="data:application/pdf;base64,AAAA",
        file_type="application/pdf",
        file_size=3,
    )


def test_create_appliance_with_staged_uploads(appliances, fake_supabase, house):
    result = appliances.save_appliance(
        {"house_id": house["id"], "appliance_type": "Dryer", "purchase_cost": None},
        OWNER_ID,
        uploads=[upload("a.pdf"), upload("b.pdf")],
    )

    assert result.success, result.error
    record = result.data
    assert record.appliance.purchase_cost == Decimal("0")
    assert [a.file_name for a in record.attachments] == ["a.pdf", "b.pdf"]
    stored = fake_supabase.rows("appliance_attachments")
    assert {row["appliance_id"] for row in stored} == {record.appliance.id}


def test_appliance_type_is_required(appliances, fake_supabase, house):
    result = appliances.save_appliance({"house_id": house["id"]}, OWNER_ID)

    assert not result.success
    assert result.status_code == 400
    assert result.field_errors == {"appliance_type": "Appliance type is required"}
    assert fake_supabase.rows("interior_appliances") == []


def test_upload_cap_rejects_batch_before_saving(appliances, fake_supabase, appliance):
    for name in ("one", "two"):
        fake_supabase.seed(
            "appliance_attachments",
            appliance_id=appliance["id"],
            file_name=name,
            file_url="data:,",
        )

    result = appliances.save_appliance(
        {"appliance_type": "Dishwasher", "brand": "Bosch"},
        OWNER_ID,
        appliance_id=appliance["id"],
        uploads=[upload("x"), upload("y")],
    )

    assert result.status_code == 413
    assert result.error == "Maximum 3 files allowed"
    assert fake_supabase.row("interior_appliances", appliance["id"]).get("brand") is None


def test_list_groups_repairs_and_attachments(appliances, fake_supabase, house, appliance):
    fake_supabase.seed(
        "appliance_repairs",
        appliance_id=appliance["id"],
        repair_date="2023-01-01",
        repair_cost="50",
    )
    fake_supabase.seed(
        "appliance_repairs",
        appliance_id=appliance["id"],
        repair_date="2024-01-01",
        repair_cost="75",
    )

    result = appliances.list_appliances(house["id"], OWNER_ID)

    assert result.success
    (record,) = result.data
    assert [str(r.repair_date) for r in record.repairs] == ["2024-01-01", "2023-01-01"]
    assert record.attachments == []


def test_trash_cascades_and_restore_reverses_only_that_cascade(
    appliances, fake_supabase, appliance
):
    old_repair = fake_supabase.seed(
        "appliance_repairs",
        appliance_id=appliance["id"],
        deleted_at="2020-01-01T00:00:00+00:00",
    )
    live_repair = fake_supabase.seed("appliance_repairs", appliance_id=appliance["id"])
    attachment = fake_supabase.seed(
        "appliance_attachments",
        appliance_id=appliance["id"],
        file_name="f",
        file_url="data:,",
    )

    trashed = appliances.trash_appliance(appliance["id"], OWNER_ID)

    assert trashed.success
    marker = trashed.data
    assert fake_supabase.row("interior_appliances", appliance["id"])["deleted_at"] == marker
    assert fake_supabase.row("appliance_repairs", live_repair["id"])["deleted_at"] == marker
    assert fake_supabase.row("appliance_attachments", attachment["id"])["deleted_at"] == marker

    restored = appliances.restore_appliance(appliance["id"], OWNER_ID)

    assert restored.success
    assert fake_supabase.row("interior_appliances", appliance["id"])["deleted_at"] is None
    assert fake_supabase.row("appliance_repairs", live_repair["id"])["deleted_at"] is None
    assert fake_supabase.row("appliance_attachments", attachment["id"])["deleted_at"] is None
    assert (
        fake_supabase.row("appliance_repairs", old_repair["id"])["deleted_at"]
        == "2020-01-01T00:00:00+00:00"
    )


def test_permanent_delete_uses_rpc(appliances, fake_supabase, appliance):
    fake_supabase.seed("appliance_repairs", appliance_id=appliance["id"])

    result = appliances.delete_appliance(appliance["id"], OWNER_ID)

    assert result.success
    assert fake_supabase.rpc_calls == [
        ("permanent_delete_appliance", {"appliance_id": appliance["id"]})
    ]
    assert fake_supabase.rows("interior_appliances") == []
    assert fake_supabase.rows("appliance_repairs") == []


def test_stranger_cannot_trash(appliances, fake_supabase, appliance):
    result = appliances.trash_appliance(appliance["id"], STRANGER_ID)

    assert result.status_code == 403
    assert result.error == "You do not have permission to change this record."
    assert fake_supabase.row("interior_appliances", appliance["id"])["deleted_at"] is None


def test_repair_requires_date_and_description(appliances, appliance):
    result = appliances.add_repair({"appliance_id": appliance["id"]}, OWNER_ID)

    assert result.status_code == 400
    assert set(result.field_errors) == {"repair_date", "description"}


def test_add_and_delete_repair(appliances, fake_supabase, appliance):
    added = appliances.add_repair(
        {
            "appliance_id": appliance["id"],
            "repair_date": "2024-03-02",
            "description": "New pump",
            "repair_cost": "120.50",
        },
        OWNER_ID,
    )
    assert added.success
    assert added.data.repair_cost == Decimal("120.50")

    deleted = appliances.delete_repair(added.data.id, OWNER_ID)
    assert deleted.success
    assert fake_supabase.row("appliance_repairs", added.data.id)["deleted_at"] == deleted.data


def test_delete_attachment_is_soft(appliances, fake_supabase, appliance):
    attachment = fake_supabase.seed(
        "appliance_attachments", appliance_id=appliance["id"], file_name="f", file_url="data:,"
    )

    result = appliances.delete_attachment(attachment["id"], OWNER_ID)

    assert result.success
    assert fake_supabase.row("appliance_attachments", attachment["id"])["deleted_at"]


def test_policy_rejection_maps_to_forbidden(appliances, fake_supabase, house):
    fake_supabase.fail(
        "interior_appliances",
        FakeAPIError("new row violates row-level security policy", code="42501"),
        ops={"insert"},
    )

    result = appliances.save_appliance(
        {"house_id": house["id"], "appliance_type": "Microwave"}, OWNER_ID
    )

    assert result.status_code == 403


def test_unlisted_type_is_listed_but_not_saved(appliances, fake_supabase, house):
    fake_supabase.seed("interior_appliances", house_id=house["id"], appliance_type="Sump Pump")

    listed = appliances.list_appliances(house["id"], OWNER_ID)
    assert listed.success, listed.error
    assert [r.appliance.appliance_type for r in listed.data] == ["Sump Pump"]

    result = appliances.save_appliance(
        {"house_id": house["id"], "appliance_type": "Sump Pump"}, OWNER_ID
    )

    assert result.status_code == 400
    assert result.field_errors == {
        "appliance_type": "Appliance type must be one of the listed options"
    }
    assert len(fake_supabase.rows("interior_appliances")) == 1
