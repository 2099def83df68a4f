from conftest import auth_headers
from loandesk.models.audit_log import AuditLog
from loandesk.models.hierarchy import HierarchyEdge


def assign(client, admin, subordinate, manager):
    return client.post(
        "/admin/hierarchy/assign",
        json={"subordinate_id": subordinate.id, "manager_id": manager.id},
        headers=auth_headers(admin),
    )


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_assign_manager(client, db, admin, users):
    response = assign(client, admin, users["bob"], users["alice"])

    assert response.status_code == 201
    body = response.json()
    assert body["manager_id"] == users["alice"].id
    assert body["subordinate_id"] == users["bob"].id
    assert body["manager"]["name"] == "Alice"
    assert body["subordinate"]["name"] == "Bob"

    audit = db.query(AuditLog).filter(AuditLog.action == "admin.hierarchy.assign").all()
    assert len(audit) == 1
    assert audit[0].user_id == admin.id
    assert audit[0].resource_type == "hierarchy"


def test_assign_requires_hierarchy_permission(client, db, users):
    response = assign(client, users["alice"], users["bob"], users["alice"])

    assert response.status_code == 403
    assert response.json()["code"] == "PERMISSION_DENIED"
    assert db.query(HierarchyEdge).count() == 0


def test_assign_requires_authentication(client, users):
    response = client.post(
        "/admin/hierarchy/assign",
        json={"subordinate_id": users["bob"].id, "manager_id": users["alice"].id},
    )
    assert response.status_code == 401


def test_assign_rejects_cycle(client, db, admin, users):
    assign(client, admin, users["bob"], users["alice"])
    assign(client, admin, users["carol"], users["bob"])

    response = assign(client, admin, users["alice"], users["carol"])

    assert response.status_code == 400
    assert response.json()["code"] == "CYCLE_DETECTED"
    assert response.json()["detail"] == "This assignment would create a circular hierarchy"
    assert db.query(HierarchyEdge).count() == 2
    assert db.query(AuditLog).filter(AuditLog.action == "admin.hierarchy.assign").count() == 2


def test_assign_rejects_self_reference(client, admin, users):
    response = assign(client, admin, users["bob"], users["bob"])
    assert response.status_code == 400
    assert response.json()["code"] == "SELF_REFERENCE"


def test_assign_rejects_unknown_user(client, admin, users):
    response = client.post(
        "/admin/hierarchy/assign",
        json={"subordinate_id": users["bob"].id, "manager_id": 4242},
        headers=auth_headers(admin),
    )
    assert response.status_code == 404
    assert response.json()["code"] == "UNKNOWN_USER"


def test_remove_manager_is_idempotent(client, db, admin, users):
    assign(client, admin, users["bob"], users["alice"])

    first = client.request(
        "DELETE", "/admin/hierarchy/remove",
        json={"subordinate_id": users["bob"].id}, headers=auth_headers(admin),
    )
    second = client.request(
        "DELETE", "/admin/hierarchy/remove",
        json={"subordinate_id": users["bob"].id}, headers=auth_headers(admin),
    )

    assert first.status_code == 200
    assert first.json() == {"subordinate_id": users["bob"].id, "removed": True}
    assert second.status_code == 200
    assert second.json()["removed"] is False
    assert db.query(HierarchyEdge).count() == 0
    assert db.query(AuditLog).filter(AuditLog.action == "admin.hierarchy.remove").count() == 1


def test_tree(client, admin, users):
    assign(client, admin, users["bob"], users["alice"])
    assign(client, admin, users["carol"], users["alice"])
    assign(client, admin, users["dave"], users["bob"])

    response = client.get("/admin/hierarchy/tree", headers=auth_headers(admin))

    assert response.status_code == 200
    body = response.json()
    assert body["max_depth"] == 2
    assert [n["user"]["name"] for n in body["root"]] == ["Admin", "Alice"]
    alice = body["root"][1]
    assert [(n["user"]["name"], n["depth"]) for n in alice["subordinates"]] == [("Bob", 1), ("Carol", 1)]
    assert alice["subordinates"][0]["subordinates"][0]["user"]["name"] == "Dave"
    assert alice["subordinates"][0]["subordinates"][0]["depth"] == 2


def test_tree_requires_permission(client, users):
    response = client.get("/admin/hierarchy/tree", headers=auth_headers(users["carol"]))
    assert response.status_code == 403


def test_my_manager_and_subordinates(client, admin, users):
    assign(client, admin, users["bob"], users["alice"])
    assign(client, admin, users["carol"], users["alice"])

    manager = client.get("/users/me/manager", headers=auth_headers(users["bob"]))
    assert manager.status_code == 200
    assert manager.json()["id"] == users["alice"].id

    subordinates = client.get("/users/me/subordinates", headers=auth_headers(users["alice"]))
    assert [u["name"] for u in subordinates.json()] == ["Bob", "Carol"]


def test_my_manager_is_404_for_root(client, users):
    response = client.get("/users/me/manager", headers=auth_headers(users["alice"]))
    assert response.status_code == 404
