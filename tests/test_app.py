from models.database import db


def test_root(client):
    body = client.get("/").json()
    assert body["message"] == "FitFusion API"
    assert body["status"] == "running"


def test_health_reports_database(client):
    body = client.get("/health").json()
    assert body["status"] == "healthy"
    assert body["database"] == "connected"


def test_health_without_database(client):
    db.client = None
    body = client.get("/health").json()
    assert body["status"] == "degraded"
    assert body["database"] == "disconnected"
