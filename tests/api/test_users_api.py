"""
API tests for /users.
"""

import bcrypt


def _hash(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=4)).decode()


class TestUserCrud:
    """Tests for create/get/list/update/delete."""

    def test_create_hashes_password(self, client, store):
        resp = client.post("/users", json={"username": "ann", "password": "pw", "email": "ann@x.io"})

        assert resp.status_code == 201
        body = resp.json()
        assert len(body) == 1
        assert body[0]["username"] == "ann"
        assert "id" in body[0]
        assert "password" not in body[0]

        stored = store.tables["users"][0]
        assert stored["password"] != "pw"
        assert bcrypt.checkpw(b"pw", stored["password"].encode())

    def test_create_requires_fields(self, client, store):
        resp = client.post("/users", json={"username": "ann"})
        assert resp.status_code == 400
        assert "password" in resp.json()["error"]
        assert "users" not in store.tables

    def test_get_by_id(self, client, store):
        (user,) = store.seed("users", {"username": "bob", "email": "b@x.io", "password": "h"})

        resp = client.get(f"/users/{user['id']}")

        assert resp.status_code == 200
        assert resp.json() == {"id": user["id"], "username": "bob", "email": "b@x.io"}

    def test_get_missing(self, client):
        resp = client.get("/users/999")
        assert resp.status_code == 404
        assert resp.json() == {"error": "User not found"}

    def test_list_paginates(self, client, store):
        store.seed("users", *[{"username": f"u{i}", "email": f"u{i}@x.io"} for i in range(7)])

        first = client.get("/users", params={"page": 1, "pageSize": 3}).json()
        last = client.get("/users", params={"page": 3, "pageSize": 3}).json()

        assert [u["username"] for u in first["data"]] == ["u0", "u1", "u2"]
        assert [u["username"] for u in last["data"]] == ["u6"]
        assert first["total"] == last["total"] == 7

    def test_list_defaults(self, client, store):
        store.seed("users", *[{"username": f"u{i}"} for i in range(12)])
        body = client.get("/users").json()
        assert len(body["data"]) == 10
        assert body["total"] == 12

    def test_list_rejects_non_numeric_page(self, client):
        resp = client.get("/users", params={"page": "abc"})
        assert resp.status_code == 400

    def test_update_partial(self, client, store):
        (user,) = store.seed("users", {"username": "old", "email": "keep@x.io"})

        resp = client.put(f"/users/{user['id']}", json={"username": "new"})

        assert resp.status_code == 200
        assert resp.json()[0]["username"] == "new"
        assert resp.json()[0]["email"] == "keep@x.io"

    def test_update_drops_empty_string(self, client, store):
        (user,) = store.seed("users", {"username": "old", "email": "keep@x.io"})

        resp = client.put(f"/users/{user['id']}", json={"email": "", "username": "new"})

        assert resp.json()[0]["email"] == "keep@x.io"

    def test_update_rehashes_password(self, client, store):
        (user,) = store.seed("users", {"username": "ann", "password": "old-hash"})

        client.put(f"/users/{user['id']}", json={"password": "fresh"})

        stored = store.tables["users"][0]["password"]
        assert bcrypt.checkpw(b"fresh", stored.encode())

    def test_update_missing(self, client):
        resp = client.put("/users/404", json={"username": "x"})
        assert resp.status_code == 404
        assert resp.json()["error"] == "User not found"

    def test_delete_is_idempotent(self, client, store):
        (user,) = store.seed("users", {"username": "gone"})

        assert client.delete(f"/users/{user['id']}").status_code == 204
        assert store.tables["users"] == []
        resp = client.delete(f"/users/{user['id']}")
        assert resp.status_code == 204
        assert resp.content == b""


class TestUserLookups:
    """Tests for search, availability and per-user listings."""

    def test_search_matches_username_or_email(self, client, store):
        store.seed(
            "users",
            {"username": "Alice", "email": "a@x.io"},
            {"username": "bob", "email": "ALIce@corp.io"},
            {"username": "carol", "email": "c@x.io"},
        )

        resp = client.get("/users/search", params={"query": "alice"})

        assert resp.status_code == 200
        assert sorted(u["username"] for u in resp.json()) == ["Alice", "bob"]

    def test_search_requires_query(self, client):
        resp = client.get("/users/search")
        assert resp.status_code == 400
        assert resp.json() == {"error": "Search query is required"}

    def test_check_availability(self, client, store):
        store.seed("users", {"username": "taken", "email": "t@x.io"})

        assert client.get("/users/check-availability", params={"username": "taken"}).json() == {"isAvailable": False}
        assert client.get("/users/check-availability", params={"username": "free"}).json() == {"isAvailable": True}
        assert client.get(
            "/users/check-availability", params={"username": "taken", "email": "other@x.io"}
        ).json() == {"isAvailable": True}

    def test_check_availability_requires_a_field(self, client):
        resp = client.get("/users/check-availability")
        assert resp.status_code == 400
        assert resp.json() == {"error": "Username or email is required"}

    def test_user_functions_and_steps(self, client, store):
        store.seed("functions", {"creator_id": 1, "expression": "x"}, {"creator_id": 2, "expression": "y"})
        store.seed("steps", {"player_id": 1, "turn_number": 1})

        assert [f["expression"] for f in client.get("/users/1/functions").json()] == ["x"]
        assert len(client.get("/users/1/steps").json()) == 1
        assert client.get("/users/3/steps").json() == []

    def test_statistics(self, client, store):
        store.seed(
            "games",
            {"player1_id": 1, "player2_id": 2},
            {"player1_id": 3, "player2_id": 1},
            {"player1_id": 2, "player2_id": 3},
        )
        store.seed("tickets", {"user_id": 1}, {"user_id": 2})
        store.seed("functions", {"creator_id": 1}, {"creator_id": 1})

        resp = client.get("/users/1/statistics")

        assert resp.status_code == 200
        assert resp.json() == {"gamesCount": 2, "ticketsCount": 1, "functionsCount": 2}
        assert sorted(op for op, _ in store.calls) == ["count", "count", "count"]


class TestRoles:
    def test_assign_list_remove(self, client, store):
        resp = client.post("/users/assign-role", json={"userId": 1, "roleId": 2})

        assert resp.status_code == 201
        row = resp.json()[0]
        assert row["user_id"] == 1
        assert row["role_id"] == 2
        assert row["assigned_at"]

        assert len(client.get("/users/1/roles").json()) == 1
        assert client.delete("/users/1/roles/2").status_code == 204
        assert store.tables["user_roles"] == []


class TestLogin:
    """Tests for POST /users/login."""

    def test_success_returns_projection(self, client, store):
        (user,) = store.seed("users", {"username": "ann", "email": "a@x.io", "password_hash": _hash("pw")})

        resp = client.post("/users/login", json={"username": "ann", "password": "pw"})

        assert resp.status_code == 200
        assert resp.json() == {"id": user["id"], "username": "ann", "email": "a@x.io"}

    def test_wrong_password_and_unknown_user_look_the_same(self, client, store):
        store.seed("users", {"username": "ann", "password_hash": _hash("pw")})

        wrong = client.post("/users/login", json={"username": "ann", "password": "nope"})
        unknown = client.post("/users/login", json={"username": "ghost", "password": "pw"})

        assert wrong.status_code == unknown.status_code == 401
        assert wrong.json() == unknown.json() == {"error": "Invalid credentials"}

    def test_hash_stored_only_in_password_column(self, client, store):
        """Users created through POST /users keep the hash in `password`; login reads `password_hash`."""
        client.post("/users", json={"username": "ann", "password": "pw", "email": "a@x.io"})

        resp = client.post("/users/login", json={"username": "ann", "password": "pw"})

        assert resp.status_code == 401
        assert resp.json() == {"error": "Invalid credentials"}


class TestLongPasswords:
    """Passwords longer than bcrypt's 72-byte input limit."""

    def test_create_with_80_char_password(self, client, store):
        resp = client.post("/users", json={"username": "a", "password": "p" * 80, "email": "a@x.io"})

        assert resp.status_code == 201
        stored = store.tables["users"][0]["password"]
        assert bcrypt.checkpw(b"p" * 72, stored.encode())

    def test_update_with_80_char_password(self, client, store):
        (user,) = store.seed("users", {"username": "a", "password": "old"})

        resp = client.put(f"/users/{user['id']}", json={"password": "q" * 80})

        assert resp.status_code == 200

    def test_login_with_80_char_password(self, client, store):
        store.seed("users", {"username": "a", "email": "a@x.io", "password_hash": _hash("p" * 72)})

        resp = client.post("/users/login", json={"username": "a", "password": "p" * 80})

        assert resp.status_code == 200
        assert resp.json()["username"] == "a"


def test_backend_error_is_500_with_raw_message(client, store):
    store.fail_with = "relation \"users\" does not exist"

    resp = client.get("/users/1")

    assert resp.status_code == 500
    assert resp.json() == {"error": "relation \"users\" does not exist"}
