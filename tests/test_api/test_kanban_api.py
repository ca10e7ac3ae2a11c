"""
Tests for the kanban HTTP API against an in-memory database
"""
import pytest
from fastapi.testclient import TestClient
from app.api.deps import get_db
from app.infrastructure.db.session import make_session_factory
from app.main import app

PASSWORD = "correct-horse"


@pytest.fixture
def api_db(db_engine):
    """Route every request's session to the test engine"""
    SessionLocal = make_session_factory(db_engine)

    def _get_db():
        db = SessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_db
    yield
    app.dependency_overrides.clear()


def _login(email):
    client = TestClient(app)
    r = client.post("/api/v1/auth/register", json={"email": email, "password": PASSWORD})
    assert r.status_code == 201, r.text
    r = client.post("/api/v1/auth/login", json={"email": email, "password": PASSWORD})
    assert r.status_code == 200, r.text
    return client


@pytest.fixture
def client(api_db):
    """Logged-in client"""
    return _login("owner@example.com")


@pytest.fixture
def stranger(api_db):
    """Second logged-in user"""
    return _login("stranger@example.com")


@pytest.fixture
def board(client):
    r = client.post("/api/v1/boards/", json={"name": "Sprint"})
    assert r.status_code == 201
    return r.json()


def _column(client, board_id, name):
    r = client.post(f"/api/v1/boards/{board_id}/columns/", json={"name": name})
    assert r.status_code == 201, r.text
    return r.json()


def _task(client, board_id, column_id, title):
    r = client.post(f"/api/v1/boards/{board_id}/columns/{column_id}/tasks/", json={"title": title})
    assert r.status_code == 201, r.text
    return r.json()


def _titles(client, board_id, column_id):
    r = client.get(f"/api/v1/boards/{board_id}/columns/{column_id}/tasks/")
    assert r.status_code == 200
    return [(t["title"], t["position"]) for t in r.json()]


# ── System / auth ──

def test_health():
    r = TestClient(app).get("/health")
    assert r.status_code == 200
    assert r.text == "ok"


def test_unauthenticated_is_401(api_db):
    r = TestClient(app).get("/api/v1/boards/")
    assert r.status_code == 401


def test_duplicate_registration_is_409(client):
    r = client.post("/api/v1/auth/register", json={"email": "owner@example.com", "password": PASSWORD})
    assert r.status_code == 409


def test_bad_password_is_401(api_db):
    c = TestClient(app)
    c.post("/api/v1/auth/register", json={"email": "x@example.com", "password": PASSWORD})
    r = c.post("/api/v1/auth/login", json={"email": "x@example.com", "password": "wrong-one"})
    assert r.status_code == 401


def test_logout_ends_session(client):
    assert client.post("/api/v1/auth/logout").status_code == 204
    assert client.get("/api/v1/boards/").status_code == 401


# ── Boards / columns ──

def test_board_crud(client, board):
    assert board["name"] == "Sprint"
    assert [b["id"] for b in client.get("/api/v1/boards/").json()] == [board["id"]]

    r = client.put(f"/api/v1/boards/{board['id']}", json={"name": "Renamed"})
    assert r.status_code == 200
    assert r.json()["name"] == "Renamed"

    assert client.delete(f"/api/v1/boards/{board['id']}").status_code == 204
    assert client.get(f"/api/v1/boards/{board['id']}").status_code == 404


def test_empty_name_is_400(client):
    r = client.post("/api/v1/boards/", json={"name": "  "})
    assert r.status_code == 400
    assert "name" in r.json()["detail"]


def test_columns_positions_and_delete(client, board):
    bid = board["id"]
    todo = _column(client, bid, "Todo")
    doing = _column(client, bid, "Doing")
    _column(client, bid, "Done")
    assert (todo["position"], doing["position"]) == (1, 2)

    assert client.delete(f"/api/v1/boards/{bid}/columns/{doing['id']}").status_code == 204

    cols = client.get(f"/api/v1/boards/{bid}/columns/").json()
    assert [(c["name"], c["position"]) for c in cols] == [("Todo", 1), ("Done", 2)]


def test_column_reorder(client, board):
    bid = board["id"]
    _column(client, bid, "Todo")
    done = _column(client, bid, "Done")
    r = client.put(f"/api/v1/boards/{bid}/columns/{done['id']}", json={"position": 1})
    assert r.status_code == 200
    assert r.json()["position"] == 1

    r = client.put(f"/api/v1/boards/{bid}/columns/{done['id']}", json={"position": 0})
    assert r.status_code == 400


# ── Tasks / move ──

def test_task_crud(client, board):
    bid = board["id"]
    todo = _column(client, bid, "Todo")
    a = _task(client, bid, todo["id"], "A")
    _task(client, bid, todo["id"], "B")

    r = client.put(
        f"/api/v1/boards/{bid}/columns/{todo['id']}/tasks/{a['id']}",
        json={"description": "details"},
    )
    assert r.status_code == 200
    assert r.json()["description"] == "details"

    r = client.delete(f"/api/v1/boards/{bid}/columns/{todo['id']}/tasks/{a['id']}")
    assert r.status_code == 204
    assert _titles(client, bid, todo["id"]) == [("B", 1)]


def test_move(client, board):
    bid = board["id"]
    doing = _column(client, bid, "Doing")
    done = _column(client, bid, "Done")
    _task(client, bid, doing["id"], "A")
    b = _task(client, bid, doing["id"], "B")
    _task(client, bid, doing["id"], "C")

    r = client.patch(f"/api/v1/boards/{bid}/tasks/{b['id']}/move", json={"column_id": done["id"]})

    assert r.status_code == 200
    body = r.json()
    assert body["column_id"] == done["id"]
    assert body["position"] == 1
    assert _titles(client, bid, doing["id"]) == [("A", 1), ("C", 2)]
    assert _titles(client, bid, done["id"]) == [("B", 1)]

    tasks = client.get(f"/api/v1/boards/{bid}/tasks").json()
    assert [t["title"] for t in tasks] == ["A", "C", "B"]


def test_move_to_other_board_is_404(client, board):
    bid = board["id"]
    doing = _column(client, bid, "Doing")
    a = _task(client, bid, doing["id"], "A")
    other = client.post("/api/v1/boards/", json={"name": "Other"}).json()
    inbox = _column(client, other["id"], "Inbox")

    r = client.patch(f"/api/v1/boards/{bid}/tasks/{a['id']}/move", json={"column_id": inbox["id"]})

    assert r.status_code == 404
    assert _titles(client, bid, doing["id"]) == [("A", 1)]


def test_move_without_column_is_400(client, board):
    bid = board["id"]
    doing = _column(client, bid, "Doing")
    a = _task(client, bid, doing["id"], "A")
    r = client.patch(f"/api/v1/boards/{bid}/tasks/{a['id']}/move", json={"column_id": " "})
    assert r.status_code == 400


# ── Ownership ──

def test_stranger_sees_404_everywhere(client, stranger, board):
    bid = board["id"]
    todo = _column(client, bid, "Todo")
    done = _column(client, bid, "Done")
    a = _task(client, bid, todo["id"], "A")

    assert stranger.get("/api/v1/boards/").json() == []
    assert stranger.get(f"/api/v1/boards/{bid}").status_code == 404
    assert stranger.get(f"/api/v1/boards/{bid}/columns/").status_code == 404
    assert stranger.post(f"/api/v1/boards/{bid}/columns/", json={"name": "X"}).status_code == 404
    assert stranger.delete(f"/api/v1/boards/{bid}/columns/{todo['id']}").status_code == 404
    assert stranger.get(f"/api/v1/boards/{bid}/columns/{todo['id']}/tasks/").status_code == 404
    r = stranger.patch(f"/api/v1/boards/{bid}/tasks/{a['id']}/move", json={"column_id": done["id"]})
    assert r.status_code == 404

    assert _titles(client, bid, todo["id"]) == [("A", 1)]
