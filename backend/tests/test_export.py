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


HEADER = "round_id,completed_at,course,holes_count,hole_number,seq,stroke_type,mental_ok,club_id"


def test_export_without_rounds_is_header_only(client):
    r = client.get("/api/v1/export/strokes.csv", headers=H)
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/csv")
    assert r.text == HEADER


def test_export_round_with_two_counted_strokes(client):
    client.put("/api/v1/home-club", json={"name": "Oaks, North", "pars": [3]}, headers=H)
    club = client.post("/api/v1/bag-clubs", json={"label": "9i"}, headers=H).json()
    round_id = client.post("/api/v1/rounds", json={}, headers=H).json()["id"]
    strokes = client.get(f"/api/v1/rounds/{round_id}/holes/1", headers=H).json()["strokes"]

    client.delete(f"/api/v1/strokes/{strokes[2]['id']}", headers=H)
    client.patch(
        f"/api/v1/strokes/{strokes[0]['id']}",
        json={"mental_ok": True, "club_id": club["id"]},
        headers=H,
    )

    r = client.get("/api/v1/export/strokes.csv", params={"round_id": round_id}, headers=H)
    assert r.status_code == 200
    lines = r.text.split("\n")
    assert len(lines) == 3
    assert lines[0] == HEADER
    assert lines[1] == f'{round_id},,"Oaks, North",1,1,1,TeeShot,true,{club["id"]}'
    assert lines[2] == f'{round_id},,"Oaks, North",1,1,2,Putt,false,'


def test_export_skips_uncounted_strokes(client):
    client.put("/api/v1/home-club", json={"name": "Oaks", "pars": [4]}, headers=H)
    course = client.post(
        "/api/v1/courses", json={"course_name": "Links", "pars": [4, 4]}, headers=H
    ).json()
    round_id = client.post(
        "/api/v1/rounds", json={"user_course_id": course["id"]}, headers=H
    ).json()["id"]

    assert client.get("/api/v1/export/strokes.csv", headers=H).text == HEADER

    client.post(f"/api/v1/rounds/{round_id}/holes/1/commit", headers=H)
    lines = client.get("/api/v1/export/strokes.csv", headers=H).text.split("\n")
    assert len(lines) == 5
    assert all(line.split(",")[4] == "1" for line in lines[1:])


def test_export_other_users_round_is_not_found(client):
    client.put("/api/v1/home-club", json={"name": "Oaks", "pars": [4]}, headers=H)
    round_id = client.post("/api/v1/rounds", json={}, headers=H).json()["id"]

    r = client.get(
        "/api/v1/export/strokes.csv", params={"round_id": round_id}, headers={"X-User-Id": "u2"}
    )
    assert r.status_code == 404
