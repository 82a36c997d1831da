import pytest

def test_root_reports_service(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json()["service"] == "commerce-service"

def test_info_lists_endpoints(client):
    body = client.get("/info").json()
    assert body["release_stock_on_delete"] is True
    assert body["endpoints"]["health"] == "/health"

def test_liveness(client):
    resp = client.get("/health/live")
    assert resp.status_code == 200
    assert resp.json() == {"status": "alive"}

def test_health_reports_pass(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "pass"

def test_readiness_checks_database(client):
    checks = client.get("/health/ready").json()["checks"]
    assert checks["database:connectivity"]["status"] == "pass"

def test_overall_status_takes_the_worst_check():
    from shared.core.health import HealthStatus, ServiceHealth
    checks = {"a": {"status": "pass"}, "b": {"status": "warn"}}
    assert ServiceHealth.calculate_overall_status(checks) == HealthStatus.WARN
    checks["c"] = {"status": "fail"}
    assert ServiceHealth.calculate_overall_status(checks) == HealthStatus.FAIL

def test_request_id_header_is_echoed(client):
    resp = client.get("/", headers={"X-Request-ID": "req-123"})
    assert resp.headers["X-Request-ID"] == "req-123"

def test_unknown_route_uses_error_envelope(client):
    resp = client.get("/nope")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Not Found"}

def test_failed_migration_aborts_startup(monkeypatch):
    import subprocess
    from app import main

    def failed_run(*args, **kwargs):
        return subprocess.CompletedProcess(args, returncode=1, stdout="", stderr="boom")
    monkeypatch.setattr(main.subprocess, "run", failed_run)
    with pytest.raises(RuntimeError):
        main.run_migrations()

def test_migrations_replace_create_all_at_startup(monkeypatch):
    from fastapi.testclient import TestClient
    from app import main

    calls = []
    monkeypatch.setattr(main.settings, "RUN_MIGRATIONS", True)
    monkeypatch.setattr(main, "run_migrations", lambda: calls.append("migrate"))
    monkeypatch.setattr(main, "init_models", lambda: calls.append("create_all"))
    with TestClient(main.app) as c:
        assert c.get("/health/live").status_code == 200
    assert calls == ["migrate"]
