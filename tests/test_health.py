"""Tests for the service endpoints."""


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "Library", "storage": "memory"}


def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["health"] == "/health"
