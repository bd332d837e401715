import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_db
from app.db.base import Base
import app.models  # noqa: F401
from app.main import app

H = {"X-User-Id": "u1"}


@pytest.fixture()
def client():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _play_round(client, ok_count, pars=(4,)):
    round_id = client.post("/api/v1/rounds", json={}, headers=H).json()["id"]
    marked = 0
    for hole_number in range(1, len(pars) + 1):
        hole = client.get(f"/api/v1/rounds/{round_id}/holes/{hole_number}", headers=H).json()
        for s in hole["strokes"]:
            if marked < ok_count:
                client.patch(f"/api/v1/strokes/{s['id']}", json={"mental_ok": True}, headers=H)
                marked += 1
    assert client.post(f"/api/v1/rounds/{round_id}/complete", headers=H).status_code == 200
    return round_id


def test_empty_dashboard(client):
    r = client.get("/api/v1/dashboard", headers=H)
    assert r.status_code == 200
    body = r.json()
    assert body["active_round"] is None
    assert body["latest"] is None
    assert body["prior"] == []
    assert body["trend"] is None
    assert body["trend_label"] == "—"
    assert body["breakdown"] == []
    assert body["summary"]["mental_trend"] == "flat"


def test_dashboard_latest_vs_prior(client):
    client.put("/api/v1/home-club", json={"name": "Home GC", "pars": [4]}, headers=H)
    first = _play_round(client, ok_count=2)
    second = _play_round(client, ok_count=4)

    body = client.get("/api/v1/dashboard", headers=H).json()
    assert body["latest"]["round"]["id"] == second
    assert body["latest"]["pct"] == 100
    assert [p["round"]["id"] for p in body["prior"]] == [first]
    assert body["prior_avg"] == 50
    assert body["delta"] == 50
    assert body["trend"] == "up"
    assert body["trend_label"] == "↑ +50%"
    assert body["spark"] == [50, 100]

    assert [row["stroke_type"] for row in body["breakdown"]] == ["TeeShot", "Approach", "Putt"]
    putt = body["breakdown"][-1]
    assert putt["pct"] == 100
    assert putt["prev_avg"] == 0

    # One hole only, so nothing was played on 13-16.
    assert body["late_round"]["kind"] == "highlight"
    assert body["late_round"]["pct"] is None

    assert [r["round"]["id"] for r in body["summary"]["rounds"]] == [second, first]
    assert body["summary"]["mental_trend"] == "improving"
    assert body["summary"]["stroke_trend"] == "flat"


def test_dashboard_shows_active_round(client):
    client.put("/api/v1/home-club", json={"name": "Home GC", "pars": [4]}, headers=H)
    round_id = client.post("/api/v1/rounds", json={}, headers=H).json()["id"]

    body = client.get("/api/v1/dashboard", headers=H).json()
    assert body["active_round"]["id"] == round_id
    assert body["active_round"]["course_name"] == "Home GC"
    assert body["latest"] is None


def test_round_detail_compares_with_earlier_rounds(client):
    client.put("/api/v1/home-club", json={"name": "Home GC", "pars": [4]}, headers=H)
    first = _play_round(client, ok_count=1)
    second = _play_round(client, ok_count=3)

    detail = client.get(f"/api/v1/rounds/{second}", headers=H).json()
    assert detail["pct"] == 75
    assert detail["prior_avg"] == 25
    assert detail["delta"] == 50
    assert detail["trend"] == "up"

    # Nothing was completed before the first round.
    earliest = client.get(f"/api/v1/rounds/{first}", headers=H).json()
    assert earliest["prior_avg"] is None
    assert earliest["trend"] is None


def test_history_filters(client):
    client.put("/api/v1/home-club", json={"name": "Home GC", "pars": [4]}, headers=H)
    course = client.post(
        "/api/v1/courses", json={"course_name": "Links", "pars": [4]}, headers=H
    ).json()

    home_round = _play_round(client, ok_count=2)
    course_round = client.post(
        "/api/v1/rounds", json={"user_course_id": course["id"]}, headers=H
    ).json()["id"]
    client.post(f"/api/v1/rounds/{course_round}/complete", headers=H)

    everything = client.get("/api/v1/history", params={"range": "all"}, headers=H)
    assert everything.status_code == 200
    assert [e["round"]["id"] for e in everything.json()] == [course_round, home_round]
    assert everything.json()[1]["pct"] == 50
    assert everything.json()[1]["highlights"] == ["No strong patterns detected yet."]

    recent = client.get("/api/v1/history", headers=H).json()
    assert len(recent) == 2

    home_only = client.get("/api/v1/history", params={"course": "home"}, headers=H).json()
    assert [e["round"]["id"] for e in home_only] == [home_round]

    by_course = client.get(
        "/api/v1/history", params={"course": str(course["id"])}, headers=H
    ).json()
    assert [e["round"]["course_name"] for e in by_course] == ["Links"]

    assert client.get("/api/v1/history", params={"range": "7"}, headers=H).status_code == 400
    assert client.get("/api/v1/history", params={"course": "abc"}, headers=H).status_code == 400
