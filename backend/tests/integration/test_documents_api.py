"""API tests for the documents endpoints."""

import pytest


PLANT_NOTES = b"Photosynthesis uses chlorophyll to capture light. Photosynthesis happens in leaves."


def _upload(name: str, content: bytes, content_type: str = "text/plain") -> dict:
    return {"file": (name, content, content_type)}


@pytest.mark.asyncio
async def test_upload_document(client, vector_index):
    response = await client.post("/api/v1/documents/upload", files=_upload("plants.txt", PLANT_NOTES))

    assert response.status_code == 201
    data = response.json()
    assert data["document"]["filename"] == "plants.txt"
    assert data["document"]["status"] == "indexed"
    assert data["document"]["chunk_count"] == 1
    assert "indexed" in data["message"]
    assert len(vector_index) == 1


@pytest.mark.asyncio
async def test_upload_rejects_unsupported_extension(client):
    response = await client.post(
        "/api/v1/documents/upload",
        files=_upload("virus.exe", b"MZ", "application/octet-stream"),
    )

    assert response.status_code == 400
    assert "not supported" in response.json()["detail"]


@pytest.mark.asyncio
async def test_upload_rejects_empty_file(client):
    response = await client.post("/api/v1/documents/upload", files=_upload("empty.txt", b""))

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_upload_with_indexing_failure_still_succeeds(client, embedding_provider):
    embedding_provider.fail = True

    response = await client.post("/api/v1/documents/upload", files=_upload("plants.txt", PLANT_NOTES))

    assert response.status_code == 201
    document = response.json()["document"]
    assert document["status"] == "index_failed"
    assert "unreachable" in document["error_message"]


@pytest.mark.asyncio
async def test_list_and_get_documents(client):
    await client.post("/api/v1/documents/upload", files=_upload("first.txt", b"DNA stores genetic code."))
    await client.post("/api/v1/documents/upload", files=_upload("second.md", PLANT_NOTES, "text/markdown"))

    listing = await client.get("/api/v1/documents")
    assert listing.status_code == 200
    assert [d["filename"] for d in listing.json()] == ["second.md", "first.txt"]

    document_id = listing.json()[1]["id"]
    detail = await client.get(f"/api/v1/documents/{document_id}")
    assert detail.status_code == 200
    assert detail.json()["content_preview"] == "DNA stores genetic code."
    assert detail.json()["content_length"] == len("DNA stores genetic code.")


@pytest.mark.asyncio
async def test_get_unknown_document_returns_404(client):
    response = await client.get("/api/v1/documents/999")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_reindex_after_failure(client, embedding_provider, vector_index):
    embedding_provider.fail = True
    uploaded = await client.post("/api/v1/documents/upload", files=_upload("plants.txt", PLANT_NOTES))
    document_id = uploaded.json()["document"]["id"]

    failed = await client.post(f"/api/v1/documents/{document_id}/reindex")
    assert failed.status_code == 502

    embedding_provider.fail = False
    response = await client.post(f"/api/v1/documents/{document_id}/reindex")

    assert response.status_code == 200
    assert response.json()["status"] == "indexed"
    assert len(vector_index) == response.json()["chunk_count"]


@pytest.mark.asyncio
async def test_delete_document_purges_vectors(client, vector_index):
    uploaded = await client.post("/api/v1/documents/upload", files=_upload("plants.txt", PLANT_NOTES))
    document_id = uploaded.json()["document"]["id"]

    response = await client.delete(f"/api/v1/documents/{document_id}")

    assert response.status_code == 204
    assert len(vector_index) == 0
    assert (await client.get(f"/api/v1/documents/{document_id}")).status_code == 404


@pytest.mark.asyncio
async def test_delete_unknown_document_returns_404(client):
    response = await client.delete("/api/v1/documents/999")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_upload_of_corrupt_file_reports_processing_failure(client, tmp_path):
    response = await client.post(
        "/api/v1/documents/upload",
        files=_upload(
            "broken.pptx",
            b"PK\x03\x04 not really a zip",
            "application/vnd.openxmlformats-officedocument.presentationml.presentation",
        ),
    )

    assert response.status_code == 500
    assert "Failed to process document 'broken.pptx'" in response.json()["detail"]
    assert list((tmp_path / "documents").iterdir()) == []
    assert (await client.get("/api/v1/documents")).json() == []
