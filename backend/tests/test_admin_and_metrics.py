from __future__ import annotations

from chirpy.core import config as app_config
from chirpy.models.chirp import Chirp
from chirpy.models.refresh_token import RefreshToken
from chirpy.models.user import User


def test_healthz(http):
    res = http.get("/api/healthz")
    assert res.status_code == 200
    assert res.text == "OK"
    assert res.headers["content-type"].startswith("text/plain")


def test_metrics_counts_fileserver_hits_only(http):
    for _ in range(3):
        http.get("/app/")
    http.get("/api/healthz")

    res = http.get("/admin/metrics")
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/html")
    assert "Chirpy has been visited 3 times!" in res.text


def test_reset_forbidden_outside_dev(http, users):
    res = http.post("/admin/reset")
    assert res.status_code == 403
    assert res.json()["error"] == "FORBIDDEN"


def test_reset_in_dev_deletes_users_and_hits(db_session, users):
    from fastapi.testclient import TestClient

    from chirpy.core.database import get_db
    from chirpy.main import create_app

    app_config.settings.PLATFORM = "dev"
    app = create_app()

    def override_get_db():
        yield db_session
    app.dependency_overrides[get_db] = override_get_db

    user, _ = users
    db_session.add(Chirp(body="bye", user_id=user.id))
    db_session.commit()

    with TestClient(app) as http:
        http.post("/api/login", json={"email": user.email, "password": "04234"})
        http.get("/app/")

        res = http.post("/admin/reset")
        assert res.status_code == 200
        assert res.json() == {"deleted": True}

        assert "visited 0 times" in http.get("/admin/metrics").text

    assert db_session.query(User).count() == 0
    assert db_session.query(Chirp).count() == 0
    assert db_session.query(RefreshToken).count() == 0
