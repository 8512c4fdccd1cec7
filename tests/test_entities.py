import pytest

from app.core.exceptions import NotFoundError, ValidationError
from app.models.asset import EntityKind

from conftest import make_asset, make_sub_asset, read_document


@pytest.mark.anyio
async def test_create_asset_fills_id_defaults_and_timestamps(inventory, data_dir):
    created = await inventory.entities.create(EntityKind.ASSET, {"name": "Laptop", "quantity": None})

    assert created["id"]
    assert created["quantity"] == 1
    assert created["maintenanceEvents"] == []
    assert created["createdAt"] == created["updatedAt"]
    assert read_document(data_dir, "Assets") == [created]


@pytest.mark.anyio
async def test_create_rejects_blank_name_and_duplicate_id(inventory, abc_tree):
    with pytest.raises(ValidationError):
        await inventory.entities.create(EntityKind.ASSET, {"name": "   "})
    with pytest.raises(ValidationError):
        await inventory.entities.create(EntityKind.ASSET, {"id": "B", "name": "Clash"})


@pytest.mark.anyio
async def test_create_sub_asset_checks_parents(inventory, abc_tree):
    with pytest.raises(ValidationError):
        await inventory.entities.create(EntityKind.SUB_ASSET, {"name": "Orphan"})
    with pytest.raises(ValidationError):
        await inventory.entities.create(EntityKind.SUB_ASSET, {"name": "Lost", "parentId": "missing"})
    with pytest.raises(ValidationError):
        await inventory.entities.create(
            EntityKind.SUB_ASSET, {"name": "Wrong", "parentId": "A1", "parentSubId": "missing"}
        )

    created = await inventory.entities.create(
        EntityKind.SUB_ASSET, {"name": "Screw", "parentId": "A1", "parentSubId": "C"}
    )
    assert created["parentSubId"] == "C"

    top = await inventory.entities.create(EntityKind.SUB_ASSET, {"name": "Leg", "parentId": "A1", "parentSubId": ""})
    assert top["parentSubId"] is None


@pytest.mark.anyio
async def test_create_many_is_all_or_nothing(inventory, abc_tree, data_dir):
    with pytest.raises(ValidationError):
        await inventory.entities.create_many(EntityKind.ASSET, [{"name": "Good"}, {"name": ""}])
    assert len(read_document(data_dir, "Assets")) == 1

    created = await inventory.entities.create_many(EntityKind.ASSET, [{"name": "One"}, {"name": "Two"}])
    assert [c["name"] for c in created] == ["One", "Two"]
    assert len(read_document(data_dir, "Assets")) == 3


@pytest.mark.anyio
async def test_create_many_allows_children_of_earlier_items(inventory, abc_tree):
    created = await inventory.entities.create_many(
        EntityKind.SUB_ASSET,
        [
            {"id": "P", "name": "Panel", "parentId": "A1"},
            {"name": "Hinge", "parentId": "A1", "parentSubId": "P"},
        ],
    )
    assert created[1]["parentSubId"] == "P"


@pytest.mark.anyio
async def test_create_many_rejects_empty_and_oversized_batches(inventory):
    with pytest.raises(ValidationError):
        await inventory.entities.create_many(EntityKind.ASSET, [])
    with pytest.raises(ValidationError):
        await inventory.entities.create_many(EntityKind.ASSET, [{"name": f"A{i}"} for i in range(101)])


@pytest.mark.anyio
async def test_attachment_legacy_path_mirrors_first_path(inventory):
    created = await inventory.entities.create(
        EntityKind.ASSET,
        {"name": "Camera", "photoPaths": ["/Images/a.jpg", "/Images/b.jpg"], "photoInfo": []},
    )
    assert created["photoPath"] == "/Images/a.jpg"

    with pytest.raises(ValidationError):
        await inventory.entities.create(
            EntityKind.ASSET,
            {"name": "Bad", "photoPaths": ["/Images/a.jpg"], "photoInfo": [{}, {}]},
        )


@pytest.mark.anyio
async def test_maintenance_events_without_ids_get_one(inventory):
    created = await inventory.entities.create(
        EntityKind.ASSET,
        {"name": "Car", "maintenanceEvents": [{"name": "Oil", "type": "frequency"}, {"id": "keep", "name": "Tyres"}]},
    )
    event_ids = [e["id"] for e in created["maintenanceEvents"]]
    assert event_ids[0]
    assert event_ids[1] == "keep"


@pytest.mark.anyio
async def test_update_merges_and_refreshes_updated_at(inventory, seed_documents, data_dir):
    seed_documents([make_asset("A1", "Printer", manufacturer="HP", createdAt="2024-01-01T00:00:00+00:00")])

    updated = await inventory.entities.update(EntityKind.ASSET, "A1", {"name": "Office printer", "createdAt": "x"})

    assert updated["name"] == "Office printer"
    assert updated["manufacturer"] == "HP"
    assert updated["createdAt"] == "2024-01-01T00:00:00+00:00"
    assert updated["updatedAt"] != updated["createdAt"]
    assert read_document(data_dir, "Assets") == [updated]


@pytest.mark.anyio
async def test_update_rejects_id_change_and_unknown_record(inventory, abc_tree):
    with pytest.raises(ValidationError):
        await inventory.entities.update(EntityKind.ASSET, "A1", {"id": "A9"})
    with pytest.raises(NotFoundError):
        await inventory.entities.update(EntityKind.ASSET, "A9", {"name": "x"})


@pytest.mark.anyio
async def test_sub_asset_cannot_move_to_another_asset(inventory, seed_documents):
    seed_documents([make_asset("A1"), make_asset("A2")], [make_sub_asset("B", "A1")])
    with pytest.raises(ValidationError):
        await inventory.entities.update(EntityKind.SUB_ASSET, "B", {"parentId": "A2"})


@pytest.mark.anyio
async def test_reparent_within_asset(inventory, seed_documents, data_dir):
    seed_documents(
        [make_asset("A1")],
        [make_sub_asset("B", "A1"), make_sub_asset("C", "A1", "B"), make_sub_asset("D", "A1")],
    )

    moved = await inventory.entities.update(EntityKind.SUB_ASSET, "D", {"parentSubId": "C"})
    assert moved["parentSubId"] == "C"

    with pytest.raises(ValidationError):
        await inventory.entities.update(EntityKind.SUB_ASSET, "B", {"parentSubId": "B"})
    with pytest.raises(ValidationError):
        await inventory.entities.update(EntityKind.SUB_ASSET, "B", {"parentSubId": "D"})

    back = await inventory.entities.update(EntityKind.SUB_ASSET, "D", {"parentSubId": ""})
    assert back["parentSubId"] is None


@pytest.mark.anyio
async def test_files_to_delete_are_removed_on_update(inventory, seed_documents, write_attachment, data_dir):
    old = write_attachment("Images/old.jpg")
    seed_documents([make_asset("A1", photoPaths=[old], photoPath=old)])

    updated = await inventory.entities.update(
        EntityKind.ASSET, "A1", {"photoPaths": [], "photoInfo": [], "filesToDelete": [old]}
    )

    assert not (data_dir / "Images" / "old.jpg").exists()
    assert updated["photoPath"] is None
    assert "filesToDelete" not in updated


@pytest.mark.anyio
async def test_reads_default_quantity_and_filter_by_parent(inventory, seed_documents):
    seed_documents(
        [{"id": "A1", "name": "Old record"}],
        [make_sub_asset("B", "A1"), make_sub_asset("X", "A2")],
    )

    asset = await inventory.entities.get(EntityKind.ASSET, "A1")
    assert asset["quantity"] == 1
    assert [s["id"] for s in await inventory.entities.list_all(EntityKind.SUB_ASSET, parent_id="A1")] == ["B"]
    assert len(await inventory.entities.list_all(EntityKind.SUB_ASSET)) == 2
    with pytest.raises(NotFoundError):
        await inventory.entities.get(EntityKind.SUB_ASSET, "A1")


@pytest.mark.anyio
async def test_descendants_of_sub_asset(inventory, abc_tree):
    assert [d["id"] for d in await inventory.entities.descendants("B")] == ["C"]
    with pytest.raises(NotFoundError):
        await inventory.entities.descendants("missing")


@pytest.mark.anyio
@pytest.mark.parametrize(
    "fields",
    [
        {"photoPaths": ["/Assets.json"]},
        {"receiptPaths": ["/Images/wrong-folder.jpg"]},
        {"manualPaths": ["Manuals/../SubAssets.json"]},
        {"photoPaths": [5]},
        {"photoPath": "SubAssets.json"},
    ],
)
async def test_attachment_paths_must_sit_in_their_category_folder(inventory, data_dir, fields):
    with pytest.raises(ValidationError):
        await inventory.entities.create(EntityKind.ASSET, {"name": "Bad", **fields})
    assert read_document(data_dir, "Assets") == []


@pytest.mark.anyio
async def test_update_rejects_paths_outside_category_folder(inventory, seed_documents):
    seed_documents([make_asset("A1")])
    with pytest.raises(ValidationError):
        await inventory.entities.update(EntityKind.ASSET, "A1", {"photoPaths": ["Assets.json"]})
