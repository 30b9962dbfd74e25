"""
Tests for the public health check endpoint.
"""

from fastapi.testclient import TestClient

from supplement_advisor.main import app

client = TestClient(app)


def test_health_check():
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
