"""Pytest configuration and fixtures."""

import os

os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ["STORAGE_BACKEND"] = "memory"

import pytest
from fastapi.testclient import TestClient

from library.core.config import get_settings
from library.db.repositories import InMemoryBookStore, InMemoryCommentStore
from library.domains.books.services import BookService
from library.domains.comments.channel import BroadcastChannel, HandleClosed
from library.main import create_app


class RecordingHandle:
    """Подписчик, запоминающий доставленные события"""

    def __init__(self):
        self.events = []
        self.closed = False

    def deliver(self, event, data):
        if self.closed:
            raise HandleClosed()
        self.events.append((event, data))

    def received(self, event):
        return [data for name, data in self.events if name == event]


@pytest.fixture
def book_store():
    return InMemoryBookStore()


@pytest.fixture
def comment_store():
    return InMemoryCommentStore()


@pytest.fixture
def book_service(book_store, tmp_path):
    return BookService(book_store, upload_dir=str(tmp_path / "uploads"), max_upload_size=1024)


@pytest.fixture
def channel(comment_store, book_store):
    return BroadcastChannel(comment_store, book_store)


@pytest.fixture
def make_handle():
    return RecordingHandle


@pytest.fixture
def app(tmp_path, monkeypatch):
    """Приложение с in-memory хранилищами"""
    monkeypatch.setenv("UPLOAD_DIR", str(tmp_path / "uploads"))
    get_settings.cache_clear()
    yield create_app()
    get_settings.cache_clear()


@pytest.fixture
def client(app):
    """Create a test client for the FastAPI app."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(client):
    """Заголовки авторизации зарегистрированного пользователя"""
    client.post("/api/user/signup", json={"username": "alice", "password": "secret123"})
    response = client.post("/api/user/login", json={"username": "alice", "password": "secret123"})
    return {"Authorization": f"Bearer {response.json()['access_token']}"}
