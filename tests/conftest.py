import json
from pathlib import Path

import pytest
from httpx import AsyncClient, ASGITransport

from app import create_app
from app.services import Inventory


def make_asset(asset_id, name="Asset", **fields):
    record = {"id": asset_id, "name": name, "quantity": 1, "maintenanceEvents": []}
    record.update(fields)
    return record


def make_sub_asset(sub_id, parent_id, parent_sub_id=None, name=None, **fields):
    record = {
        "id": sub_id,
        "name": name or f"Component {sub_id}",
        "parentId": parent_id,
        "parentSubId": parent_sub_id,
        "quantity": 1,
        "maintenanceEvents": [],
    }
    record.update(fields)
    return record


def read_document(data_dir: Path, name: str):
    return json.loads((data_dir / f"{name}.json").read_text(encoding="utf-8"))


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "data"


@pytest.fixture
def inventory(data_dir):
    inventory = Inventory(data_dir)
    inventory.initialize()
    return inventory


@pytest.fixture
def seed_documents(data_dir, inventory):
    """Write Assets.json / SubAssets.json directly"""
    def _seed(assets=(), sub_assets=()):
        (data_dir / "Assets.json").write_text(json.dumps(list(assets)), encoding="utf-8")
        (data_dir / "SubAssets.json").write_text(json.dumps(list(sub_assets)), encoding="utf-8")
    return _seed


@pytest.fixture
def write_attachment(data_dir):
    """Create an attachment file and return its stored path ('/Images/x.jpg')"""
    def _write(relative_path, content=b"attachment-bytes"):
        path = data_dir / relative_path.lstrip("/")
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return "/" + relative_path.lstrip("/")
    return _write


@pytest.fixture
def abc_tree(seed_documents):
    """Asset A1 owns B, B owns C"""
    assets = [make_asset("A1", "Workbench", manufacturer="Acme")]
    sub_assets = [
        make_sub_asset("B", "A1", name="Vise"),
        make_sub_asset("C", "A1", "B", name="Jaw pad"),
    ]
    seed_documents(assets, sub_assets)
    return assets, sub_assets


@pytest.fixture
async def async_client(data_dir):
    app = create_app(data_dir=str(data_dir))
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac
