from fastapi.testclient import TestClient
from perf_portal.main import app


def test_health_ok():
    """Test health check endpoint"""
    client = TestClient(app)
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "environment": "testing", "database": "sqlite"}


def test_root_endpoint():
    client = TestClient(app)
    data = client.get("/").json()
    assert data["name"] == "Performance Evaluation Portal"
    assert data["status"] == "ok"
    assert data["roles"] == {"employee": "Employee", "manager": "Manager", "hr_admin": "HR Administrator"}
