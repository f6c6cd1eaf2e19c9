"""Tests for local file storage utility."""

import pytest

from utils import storage


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    monkeypatch.setattr("utils.storage.settings.UPLOAD_DIR", str(tmp_path))
    return tmp_path


@pytest.mark.asyncio
async def test_put_object_creates_nested_folders(upload_dir):
    await storage.put_object("car-images/l1/abc.jpg", b"data", "image/jpeg")

    assert (upload_dir / "car-images" / "l1" / "abc.jpg").read_bytes() == b"data"


@pytest.mark.asyncio
async def test_put_object_rejects_path_traversal(upload_dir):
    with pytest.raises(ValueError):
        await storage.put_object("../outside.txt", b"x", "text/plain")

    assert not (upload_dir.parent / "outside.txt").exists()


@pytest.mark.asyncio
async def test_list_objects_filters_by_prefix(upload_dir):
    await storage.put_object("corporate-documents/u1/a.pdf", b"1234", "application/pdf")
    await storage.put_object("corporate-documents/u2/b.pdf", b"12", "application/pdf")

    objects = await storage.list_objects("corporate-documents/u1/")

    assert objects == [{"path": "corporate-documents/u1/a.pdf", "size": 4}]


@pytest.mark.asyncio
async def test_list_objects_missing_root(tmp_path, monkeypatch):
    monkeypatch.setattr("utils.storage.settings.UPLOAD_DIR", str(tmp_path / "missing"))
    assert await storage.list_objects("") == []


@pytest.mark.asyncio
async def test_delete_objects_counts_existing_only(upload_dir):
    await storage.put_object("car-images/l1/a.jpg", b"x", "image/jpeg")

    deleted = await storage.delete_objects(
        ["car-images/l1/a.jpg", "car-images/l1/missing.jpg", "../../etc/passwd"]
    )

    assert deleted == 1
    assert not (upload_dir / "car-images" / "l1" / "a.jpg").exists()


def test_build_url():
    assert storage.build_url("car-images/l1/a.jpg") == "/uploads/car-images/l1/a.jpg"
