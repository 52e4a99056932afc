"""HTTP tests for the file details endpoints."""

import pytest


def file_json(name: str, day: int) -> dict:
    return {
        "originalFilename": name,
        "filename": name,
        "dateAdded": f"2024-02-{day:02d}T00:00:00Z",
        "authorId": "a1",
        "mimetype": "text/plain",
        "size": 1,
        "isPrivate": False,
    }


@pytest.mark.asyncio
async def test_list_reports_totals_and_paging(client):
    batch = [file_json(f"f{day:02d}.txt", day) for day in range(1, 26)]
    created = await client.post("/api/v1/files", json=batch)
    assert created.status_code == 201

    body = (await client.get("/api/v1/files/list")).json()

    assert len(body["files"]) == 20
    assert body["totalFiles"] == 25
    assert body["page"] == 1
    assert body["pagination"] == 20
    assert body["morePages"] is True
    assert body["files"][0]["filename"] == "f25.txt"

    sorted_body = (
        await client.get("/api/v1/files/list", params={"sortBy": "filename", "page": "2"})
    ).json()
    assert [f["filename"] for f in sorted_body["files"]] == [f"f{d}.txt" for d in range(21, 26)]
    assert (await client.get("/api/v1/files/total")).json() == {"totalFiles": 25}


@pytest.mark.asyncio
async def test_update_and_bulk_delete(client):
    await client.post("/api/v1/files", json=[file_json("a.txt", 1)])

    updated = await client.put("/api/v1/files/details/a.txt", json={"isPrivate": True})
    assert updated.json()["isPrivate"] is True

    response = await client.post("/api/v1/files/delete", json=["a.txt", "b.txt"])

    assert response.status_code == 200
    results = response.json()
    assert results[0]["errors"] == []
    assert results[0]["fileDetails"]["filename"] == "a.txt"
    assert results[1] == {"filename": "b.txt", "errors": ["File Does Not Exist In Database"]}
    assert (await client.get("/api/v1/files/details/a.txt")).status_code == 404
