"""Tests for the real-time comments WebSocket."""


def _create_book(client, headers, title="Commented"):
    response = client.post("/api/books/", json={"title": title}, headers=headers)
    return response.json()["id"]


def _join(websocket, book_id):
    websocket.send_json({"event": "join room", "data": book_id})
    message = websocket.receive_json()
    assert message["event"] == "history loaded"
    return message["data"]


def test_join_room_loads_history(client, auth_headers):
    book_id = _create_book(client, auth_headers)

    with client.websocket_connect("/ws/comments") as websocket:
        assert _join(websocket, book_id) == []


def test_comment_is_broadcast_to_every_subscriber(client, auth_headers):
    book_id = _create_book(client, auth_headers)

    with client.websocket_connect("/ws/comments") as first, client.websocket_connect("/ws/comments") as second:
        _join(first, book_id)
        _join(second, book_id)

        first.send_json({"event": "new comment", "data": {"bookId": book_id, "text": "Great book", "username": "bob"}})

        for websocket in (first, second):
            message = websocket.receive_json()
            assert message["event"] == "comment received"
            assert message["data"]["text"] == "Great book"
            assert message["data"]["username"] == "bob"
            assert message["data"]["bookId"] == book_id

    history = client.get(f"/api/books/{book_id}/comments").json()
    assert [comment["text"] for comment in history] == ["Great book"]


def test_authenticated_user_name_is_used(client, auth_headers):
    book_id = _create_book(client, auth_headers)
    token = auth_headers["Authorization"].split()[1]

    with client.websocket_connect(f"/ws/comments?token={token}") as websocket:
        _join(websocket, book_id)
        websocket.send_json({"event": "new comment", "data": {"bookId": book_id, "text": "Hi", "username": "mallory"}})

        message = websocket.receive_json()
        assert message["data"]["username"] == "alice"


def test_anonymous_comment_without_username(client, auth_headers):
    book_id = _create_book(client, auth_headers)

    with client.websocket_connect("/ws/comments") as websocket:
        _join(websocket, book_id)
        websocket.send_json({"event": "new comment", "data": {"bookId": book_id, "text": "Hi"}})

        assert websocket.receive_json()["data"]["username"] == "Anonymous"


def test_invalid_comment_is_reported_to_sender_only(client, auth_headers):
    book_id = _create_book(client, auth_headers)

    with client.websocket_connect("/ws/comments") as sender, client.websocket_connect("/ws/comments") as watcher:
        _join(sender, book_id)
        _join(watcher, book_id)

        sender.send_json({"event": "new comment", "data": {"bookId": book_id, "text": "   ", "username": "bob"}})
        error = sender.receive_json()
        assert error["event"] == "comment error"
        assert error["data"]["message"] == "Text is required"

        sender.send_json({"event": "new comment", "data": {"bookId": book_id, "text": "valid", "username": "bob"}})
        assert sender.receive_json()["data"]["text"] == "valid"
        # первым watcher получает именно корректный комментарий
        assert watcher.receive_json()["data"]["text"] == "valid"

    assert len(client.get(f"/api/books/{book_id}/comments").json()) == 1


def test_comment_for_unknown_book_is_rejected(client):
    with client.websocket_connect("/ws/comments") as websocket:
        websocket.send_json({
            "event": "new comment",
            "data": {"bookId": "00000000-0000-0000-0000-000000000000", "text": "Hi", "username": "bob"},
        })

        message = websocket.receive_json()
        assert message == {"event": "comment error", "data": {"message": "Book not found"}}


def test_malformed_message_and_ping(client):
    with client.websocket_connect("/ws/comments") as websocket:
        websocket.send_text("not json")
        assert websocket.receive_json()["event"] == "comment error"

        websocket.send_json({"event": "ping"})
        assert websocket.receive_json() == {"event": "pong", "data": None}


def test_non_string_fields_are_reported_and_not_stored(client, auth_headers):
    book_id = _create_book(client, auth_headers)

    with client.websocket_connect("/ws/comments") as websocket:
        _join(websocket, book_id)

        websocket.send_json({"event": "new comment", "data": {"bookId": book_id, "text": 5, "username": "bob"}})
        error = websocket.receive_json()
        assert error["event"] == "comment error"
        assert "text" in error["data"]["message"]

        websocket.send_json({"event": "new comment", "data": {"bookId": book_id, "text": "Hi", "username": 7}})
        assert websocket.receive_json()["event"] == "comment error"

        # соединение остаётся рабочим
        websocket.send_json({"event": "ping"})
        assert websocket.receive_json()["event"] == "pong"

    assert client.get(f"/api/books/{book_id}/comments").json() == []
