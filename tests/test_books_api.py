"""Tests for the book HTTP endpoints."""

import uuid


def _create(client, headers, **fields):
    response = client.post("/api/books/", json=fields, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_create_and_get_book(client, auth_headers):
    book = _create(client, auth_headers, title="Dune", authors="Frank Herbert")

    response = client.get(f"/api/books/{book['id']}")

    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Dune"
    assert data["authors"] == "Frank Herbert"
    assert data["viewCount"] == 0
    assert data["favorite"] is False


def test_list_books(client, auth_headers):
    _create(client, auth_headers, title="One")
    _create(client, auth_headers, title="Two")

    response = client.get("/api/books/")

    assert response.status_code == 200
    assert {book["title"] for book in response.json()} == {"One", "Two"}


def test_mutations_require_authentication(client, auth_headers):
    book = _create(client, auth_headers, title="T")

    assert client.post("/api/books/", json={"title": "x"}).status_code == 401
    assert client.put(f"/api/books/{book['id']}", json={"title": "x"}).status_code == 401
    assert client.delete(f"/api/books/{book['id']}").status_code == 401


def test_invalid_token_is_rejected(client):
    response = client.post(
        "/api/books/", json={"title": "x"}, headers={"Authorization": "Bearer not-a-token"}
    )
    assert response.status_code == 401


def test_create_without_title_returns_field_errors(client, auth_headers):
    response = client.post("/api/books/", json={"description": "D"}, headers=auth_headers)

    assert response.status_code == 400
    data = response.json()
    assert data["errors"] == [{"field": "title", "message": "Title is required"}]
    assert data["detail"] == "Title is required"
    assert client.get("/api/books/").json() == []


def test_create_with_unknown_field_is_rejected(client, auth_headers):
    response = client.post("/api/books/", json={"title": "T", "viewCount": 99}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["errors"]


def test_update_changes_only_supplied_fields(client, auth_headers):
    book = _create(client, auth_headers, title="Old", description="Keep")

    response = client.put(f"/api/books/{book['id']}", json={"title": "New"}, headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["title"] == "New"
    assert response.json()["description"] == "Keep"


def test_rejected_update_returns_stored_book(client, auth_headers):
    book = _create(client, auth_headers, title="Original")

    response = client.put(f"/api/books/{book['id']}", json={"title": ""}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["book"]["title"] == "Original"
    assert client.get(f"/api/books/{book['id']}").json()["title"] == "Original"


def test_update_rejects_null_favorite(client, auth_headers):
    book = _create(client, auth_headers, title="T", favorite=True)

    response = client.put(f"/api/books/{book['id']}", json={"favorite": None}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "favorite"
    assert client.get(f"/api/books/{book['id']}").json()["favorite"] is True


def test_update_cannot_touch_view_count(client, auth_headers):
    book = _create(client, auth_headers, title="T")

    response = client.put(f"/api/books/{book['id']}", json={"viewCount": 1000}, headers=auth_headers)

    assert response.status_code == 400
    assert client.get(f"/api/books/{book['id']}").json()["viewCount"] == 0


def test_view_endpoint_counts_views(client, auth_headers):
    book = _create(client, auth_headers, title="T")

    client.get(f"/api/books/{book['id']}/view")
    response = client.get(f"/api/books/{book['id']}/view")

    assert response.json()["viewCount"] == 2
    assert client.get(f"/api/books/{book['id']}").json()["viewCount"] == 2


def test_delete_book(client, auth_headers):
    book = _create(client, auth_headers, title="T")

    response = client.delete(f"/api/books/{book['id']}", headers=auth_headers)

    assert response.status_code == 204
    assert client.get(f"/api/books/{book['id']}").status_code == 404
    assert client.delete(f"/api/books/{book['id']}", headers=auth_headers).status_code == 404


def test_unknown_and_malformed_ids_return_404(client, auth_headers):
    for book_id in (str(uuid.uuid4()), "not-a-valid-id"):
        response = client.get(f"/api/books/{book_id}")
        assert response.status_code == 404
        assert response.json()["detail"] == "Book not found"
        assert client.get(f"/api/books/{book_id}/view").status_code == 404
        assert client.put(f"/api/books/{book_id}", json={"title": "x"}, headers=auth_headers).status_code == 404


def test_comments_endpoint_starts_empty(client, auth_headers):
    book = _create(client, auth_headers, title="T")

    response = client.get(f"/api/books/{book['id']}/comments")

    assert response.status_code == 200
    assert response.json() == []


def test_upload_and_download_book_file(client, auth_headers):
    book = _create(client, auth_headers, title="T")

    response = client.put(
        f"/api/books/{book['id']}/file",
        files={"fileBook": ("novel.txt", b"Once upon a time", "text/plain")},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json()["fileName"] == "novel.txt"

    download = client.get(f"/api/books/{book['id']}/download")
    assert download.status_code == 200
    assert download.content == b"Once upon a time"
    assert "novel.txt" in download.headers["content-disposition"]


def test_upload_rejects_unsupported_extension(client, auth_headers):
    book = _create(client, auth_headers, title="T")

    response = client.put(
        f"/api/books/{book['id']}/file",
        files={"fileBook": ("script.exe", b"MZ", "application/octet-stream")},
        headers=auth_headers,
    )

    assert response.status_code == 400


def test_download_without_file_is_404(client, auth_headers):
    book = _create(client, auth_headers, title="T")

    assert client.get(f"/api/books/{book['id']}/download").status_code == 404


def test_upload_requires_file_field(client, auth_headers):
    book = _create(client, auth_headers, title="T")

    response = client.put(
        f"/api/books/{book['id']}/file",
        files={"cover": ("novel.txt", b"text", "text/plain")},
        headers=auth_headers,
    )

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "fileBook"
