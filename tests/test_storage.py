import anyio
import pytest

from app.core import storage
from app.core.exceptions import StorageError
from app.core.storage import Collection, EntityStore

from conftest import make_asset, make_sub_asset, read_document


@pytest.mark.anyio
async def test_missing_document_reads_as_empty(tmp_path):
    store = EntityStore(tmp_path / "fresh")
    assert await store.read_all(Collection.ASSETS) == []


@pytest.mark.anyio
async def test_write_all_replaces_the_whole_document(inventory, data_dir):
    await inventory.store.write_all(Collection.ASSETS, [make_asset("A1")])
    await inventory.store.write_all(Collection.ASSETS, [make_asset("A2")])
    assert [a["id"] for a in read_document(data_dir, "Assets")] == ["A2"]
    assert not [p for p in data_dir.iterdir() if p.name.endswith(".tmp")]


@pytest.mark.anyio
async def test_corrupt_document_raises_instead_of_reading_empty(inventory, data_dir):
    (data_dir / "Assets.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(StorageError):
        await inventory.store.read_all(Collection.ASSETS)


@pytest.mark.anyio
async def test_failed_second_write_restores_the_first(inventory, data_dir, seed_documents, monkeypatch):
    seed_documents([make_asset("A1")], [make_sub_asset("B", "A1")])
    real_write = storage._atomic_write
    calls = []

    def flaky_write(path, text):
        calls.append(path.name)
        if path.name == "SubAssets.json" and len(calls) == 2:
            raise OSError("disk full")
        real_write(path, text)

    monkeypatch.setattr(storage, "_atomic_write", flaky_write)

    async with inventory.store.transaction(Collection.ASSETS, Collection.SUB_ASSETS) as tx:
        with pytest.raises(StorageError):
            await tx.commit({
                Collection.ASSETS: tx[Collection.ASSETS] + [make_asset("A2")],
                Collection.SUB_ASSETS: [],
            })

    assert [a["id"] for a in read_document(data_dir, "Assets")] == ["A1"]
    assert [s["id"] for s in read_document(data_dir, "SubAssets")] == ["B"]


@pytest.mark.anyio
async def test_transactions_on_a_collection_do_not_interleave(inventory, data_dir):
    async def append(asset_id):
        async with inventory.store.transaction(Collection.ASSETS) as tx:
            assets = list(tx[Collection.ASSETS])
            await anyio.sleep(0.01)
            await tx.commit({Collection.ASSETS: assets + [make_asset(asset_id)]})

    async with anyio.create_task_group() as tg:
        for i in range(10):
            tg.start_soon(append, f"A{i}")

    assert sorted(a["id"] for a in read_document(data_dir, "Assets")) == sorted(f"A{i}" for i in range(10))
