"""Integration tests for the movie file API."""

import hashlib
from io import BytesIO
from unittest import mock

import pytest
from httpx import AsyncClient

from cinevault.domain.services import StorageIOError


async def upload(client, movie_id, headers, content=b"fake video", name="Trailer.MP4", mime="video/mp4"):
    return await client.post(
        f"/api/v1/movies/{movie_id}/file",
        headers=headers,
        files={"file": (name, BytesIO(content), mime)},
    )


@pytest.mark.asyncio
async def test_upload_requires_authentication(client: AsyncClient, movie):
    response = await upload(client, movie.id, {})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_upload_and_download(client: AsyncClient, auth_headers, movie, file_store):
    content = b"fake video bytes"

    response = await upload(client, movie.id, auth_headers, content=content)

    assert response.status_code == 201
    data = response.json()
    assert data["file_name"] == "Trailer.MP4"
    assert data["file_size"] == len(content)
    assert data["content_type"] == "video/mp4"
    assert "file_path" not in data
    assert "file_hash" not in data

    digest = hashlib.sha256(content).hexdigest()
    assert (file_store.base_path / f"movie_{movie.id}" / f"{digest[:12]}.mp4").is_file()

    download = await client.get(
        f"/api/v1/movies/{movie.id}/files/{data['id']}", headers=auth_headers
    )
    assert download.status_code == 200
    assert download.content == content
    assert download.headers["content-type"].startswith("video/mp4")


@pytest.mark.asyncio
async def test_upload_traversal_filename_is_contained(client: AsyncClient, auth_headers, movie, file_store):
    response = await upload(client, movie.id, auth_headers, name="../../etc/passwd", mime="application/octet-stream")

    assert response.status_code == 201
    assert response.json()["file_name"] == "passwd"
    stored = list((file_store.base_path / f"movie_{movie.id}").iterdir())
    assert len(stored) == 1
    assert stored[0].suffix == ""


@pytest.mark.asyncio
async def test_upload_to_missing_movie(client: AsyncClient, auth_headers):
    response = await upload(client, 999, auth_headers)

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_upload_disallowed_type(client: AsyncClient, auth_headers, movie):
    response = await upload(client, movie.id, auth_headers, name="notes.txt", mime="text/plain")

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_upload_too_large(client: AsyncClient, auth_headers, movie):
    response = await upload(client, movie.id, auth_headers, content=b"x" * (1024 * 1024 + 1))

    assert response.status_code == 413


@pytest.mark.asyncio
async def test_upload_storage_failure_hides_details(client: AsyncClient, auth_headers, movie, file_store):
    with mock.patch.object(file_store, "save", side_effect=StorageIOError("/var/secret/path is full")):
        response = await upload(client, movie.id, auth_headers)

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to store file"


@pytest.mark.asyncio
async def test_list_and_delete_files(client: AsyncClient, auth_headers, movie, file_store):
    first = (await upload(client, movie.id, auth_headers, content=b"one")).json()
    second = (await upload(client, movie.id, auth_headers, content=b"two")).json()

    listed = await client.get(f"/api/v1/movies/{movie.id}/files", headers=auth_headers)
    assert [f["id"] for f in listed.json()] == [second["id"], first["id"]]

    deleted = await client.delete(
        f"/api/v1/movies/{movie.id}/files/{first['id']}", headers=auth_headers
    )
    assert deleted.status_code == 204

    missing = await client.get(
        f"/api/v1/movies/{movie.id}/files/{first['id']}", headers=auth_headers
    )
    assert missing.status_code == 404
    assert len(list((file_store.base_path / f"movie_{movie.id}").iterdir())) == 1


@pytest.mark.asyncio
async def test_file_of_other_movie_not_found(client: AsyncClient, auth_headers, movie, db_session):
    from cinevault.domain.entities import MovieData
    from cinevault.domain.services import MovieService

    other = await MovieService(db_session).create_movie(
        MovieData(title="Heat", director="Michael Mann", year=1995)
    )
    uploaded = (await upload(client, movie.id, auth_headers)).json()

    response = await client.get(
        f"/api/v1/movies/{other.id}/files/{uploaded['id']}", headers=auth_headers
    )

    assert response.status_code == 404
