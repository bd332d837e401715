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


def test_home_club_missing_then_saved(client):
    missing = client.get("/api/v1/home-club", headers=H)
    assert missing.status_code == 404

    saved = client.put(
        "/api/v1/home-club",
        json={"name": "  Royal Oaks  ", "pars": [3, 4, 9, 1]},
        headers=H,
    )
    assert saved.status_code == 200
    body = saved.json()
    assert body["name"] == "Royal Oaks"
    assert body["holes_count"] == 4
    # Pars are clamped to 3..6.
    assert body["pars"] == [3, 4, 6, 3]

    got = client.get("/api/v1/home-club", headers=H)
    assert got.json() == body


def test_home_club_resave_renumbers_holes(client):
    client.put("/api/v1/home-club", json={"name": "Oaks", "pars": [3, 4, 5]}, headers=H)

    # Hole 2 removed: hole 3 becomes hole 2.
    r = client.put("/api/v1/home-club", json={"name": "Oaks", "pars": [3, 5]}, headers=H)
    assert r.status_code == 200
    assert r.json()["holes_count"] == 2
    assert r.json()["pars"] == [3, 5]


def test_home_club_validation(client):
    no_name = client.put("/api/v1/home-club", json={"name": "   ", "pars": [4]}, headers=H)
    assert no_name.status_code == 400
    assert no_name.json()["detail"] == "Please enter a club name."

    no_holes = client.put("/api/v1/home-club", json={"name": "Oaks", "pars": []}, headers=H)
    assert no_holes.status_code == 400


def test_create_and_list_courses(client):
    a = client.post(
        "/api/v1/courses",
        json={"course_name": "Links", "club_name": "Seaside GC", "pars": [4] * 9},
        headers=H,
    )
    assert a.status_code == 201
    assert a.json()["holes_count"] == 9
    assert [h["hole_number"] for h in a.json()["holes"]] == list(range(1, 10))
    assert a.json()["sort_order"] == 1

    b = client.post(
        "/api/v1/courses",
        json={"course_name": "Parkland", "pars": [3, 4, 5], "is_default": True},
        headers=H,
    )
    assert b.json()["sort_order"] == 2

    listed = client.get("/api/v1/courses", headers=H).json()
    assert [c["course_name"] for c in listed] == ["Parkland", "Links"]
    assert listed[0]["is_default"] is True

    # A new default replaces the old one.
    client.post(
        "/api/v1/courses",
        json={"course_name": "Heath", "pars": [4], "is_default": True},
        headers=H,
    )
    listed = client.get("/api/v1/courses", headers=H).json()
    assert [c["course_name"] for c in listed] == ["Heath", "Links", "Parkland"]
    assert [c["is_default"] for c in listed] == [True, False, False]

    # Courses are private to their owner.
    assert client.get("/api/v1/courses", headers={"X-User-Id": "u2"}).json() == []
    other = client.get(f"/api/v1/courses/{a.json()['id']}", headers={"X-User-Id": "u2"})
    assert other.status_code == 404


def test_course_hole_limits(client):
    too_many = client.post(
        "/api/v1/courses", json={"course_name": "Long", "pars": [4] * 19}, headers=H
    )
    assert too_many.status_code == 422

    blank = client.post("/api/v1/courses", json={"course_name": "   ", "pars": [4]}, headers=H)
    assert blank.status_code == 400


def test_delete_course_repacks_order(client):
    ids = [
        client.post(
            "/api/v1/courses", json={"course_name": name, "pars": [4]}, headers=H
        ).json()["id"]
        for name in ("A", "B", "C")
    ]

    d = client.delete(f"/api/v1/courses/{ids[0]}", headers=H)
    assert d.status_code == 200

    listed = client.get("/api/v1/courses", headers=H).json()
    assert [(c["course_name"], c["sort_order"]) for c in listed] == [("B", 1), ("C", 2)]
    assert client.get(f"/api/v1/courses/{ids[0]}", headers=H).status_code == 404


def test_cannot_delete_course_with_active_round(client):
    client.put("/api/v1/home-club", json={"name": "Oaks", "pars": [4]}, headers=H)
    course = client.post(
        "/api/v1/courses", json={"course_name": "Links", "pars": [4, 4]}, headers=H
    ).json()
    round_id = client.post(
        "/api/v1/rounds", json={"user_course_id": course["id"]}, headers=H
    ).json()["id"]

    blocked = client.delete(f"/api/v1/courses/{course['id']}", headers=H)
    assert blocked.status_code == 409

    client.post(f"/api/v1/rounds/{round_id}/complete", headers=H)
    assert client.delete(f"/api/v1/courses/{course['id']}", headers=H).status_code == 200

    # The finished round still carries the course name.
    detail = client.get(f"/api/v1/rounds/{round_id}", headers=H).json()
    assert detail["round"]["course_name"] == "Links"
