import pytest

from conftest import auth_headers
from loandesk.models.audit_log import AuditLog
from loandesk.models.task import Task, TaskComment
from loandesk.utils.hierarchy import HierarchyManager


@pytest.fixture()
def org(db, users):
    """Bob and Carol report to Alice, Dave reports to Bob"""
    manager = HierarchyManager(db)
    manager.assign_manager(users["bob"].id, users["alice"].id)
    manager.assign_manager(users["carol"].id, users["alice"].id)
    manager.assign_manager(users["dave"].id, users["bob"].id)
    return users


def create_task(client, creator, assignee, task_type="HIERARCHICAL", direction="DOWNWARD", **extra):
    payload = {
        "title": extra.pop("title", "Collect salary slips"),
        "assigned_to": assignee.id,
        "task_type": task_type,
        "direction": direction,
    }
    payload.update(extra)
    return client.post("/tasks", json=payload, headers=auth_headers(creator))


def test_downward_task_to_direct_subordinate(client, db, org):
    response = create_task(client, org["alice"], org["bob"], linked_case_id="HL-2024-0153", priority="HIGH")

    assert response.status_code == 201
    body = response.json()
    assert body["assigned_by"] == org["alice"].id
    assert body["assigned_to"] == org["bob"].id
    assert body["status"] == "OPEN"
    assert body["direction"] == "DOWNWARD"
    assert body["linked_case_id"] == "HL-2024-0153"
    assert body["assignee"]["name"] == "Bob"
    assert db.query(AuditLog).filter(AuditLog.action == "task.create").count() == 1


def test_downward_task_skipping_a_level_is_rejected(client, db, org):
    response = create_task(client, org["alice"], org["dave"])

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_ASSIGNMENT"
    assert response.json()["kind"] == "NOT_SUBORDINATE"
    assert db.query(Task).count() == 0
    assert db.query(AuditLog).count() == 0


def test_upward_task_to_direct_manager(client, org):
    response = create_task(client, org["dave"], org["bob"], direction="UPWARD")
    assert response.status_code == 201


def test_upward_task_to_skip_level_manager_is_rejected(client, org):
    response = create_task(client, org["dave"], org["alice"], direction="UPWARD")
    assert response.status_code == 400
    assert response.json()["kind"] == "NOT_MANAGER"


def test_hierarchical_task_needs_direction(client, org):
    response = create_task(client, org["alice"], org["bob"], direction=None)
    assert response.status_code == 400
    assert response.json()["kind"] == "WRONG_DIRECTION"


def test_personal_task_must_be_self_assigned(client, org):
    ok = create_task(client, org["carol"], org["carol"], task_type="PERSONAL", direction=None)
    bad = create_task(client, org["carol"], org["dave"], task_type="PERSONAL", direction=None)

    assert ok.status_code == 201
    assert bad.status_code == 400
    assert bad.json()["kind"] == "NOT_SELF"


def test_common_task_with_direction_is_rejected(client, org):
    response = create_task(client, org["alice"], org["dave"], task_type="COMMON", direction="DOWNWARD")
    assert response.status_code == 400
    assert response.json()["kind"] == "WRONG_DIRECTION"


def test_common_task_requires_permission(client, org):
    allowed = create_task(client, org["alice"], org["dave"], task_type="COMMON", direction=None)
    denied = create_task(client, org["carol"], org["dave"], task_type="COMMON", direction=None)

    assert allowed.status_code == 201
    assert denied.status_code == 403
    assert denied.json()["code"] == "PERMISSION_DENIED"


def test_task_for_unknown_assignee(client, org):
    response = client.post(
        "/tasks",
        json={"title": "Ghost", "assigned_to": 9999, "task_type": "COMMON"},
        headers=auth_headers(org["alice"]),
    )
    assert response.status_code == 404
    assert response.json()["code"] == "UNKNOWN_USER"


def test_blank_title_is_rejected(client, org):
    response = create_task(client, org["alice"], org["bob"], title="   ")
    assert response.status_code == 422


def test_update_revalidates_against_current_hierarchy(client, db, org):
    task_id = create_task(client, org["alice"], org["bob"]).json()["id"]
    HierarchyManager(db).remove_manager(org["bob"].id)

    response = client.put(
        f"/tasks/{task_id}", json={"title": "Collect bank statements"}, headers=auth_headers(org["alice"]),
    )

    assert response.status_code == 400
    assert response.json()["kind"] == "NOT_SUBORDINATE"
    assert db.query(Task).filter(Task.id == task_id).first().title == "Collect salary slips"


def test_update_can_reassign_to_another_subordinate(client, org):
    task_id = create_task(client, org["alice"], org["bob"]).json()["id"]

    response = client.put(
        f"/tasks/{task_id}",
        json={"assigned_to": org["carol"].id, "priority": "HIGH"},
        headers=auth_headers(org["alice"]),
    )

    assert response.status_code == 200
    assert response.json()["assigned_to"] == org["carol"].id
    assert response.json()["priority"] == "HIGH"


def test_update_to_non_subordinate_is_rejected(client, org):
    task_id = create_task(client, org["alice"], org["bob"]).json()["id"]
    response = client.put(
        f"/tasks/{task_id}", json={"assigned_to": org["dave"].id}, headers=auth_headers(org["alice"]),
    )
    assert response.status_code == 400


def test_only_creator_can_edit(client, org):
    task_id = create_task(client, org["alice"], org["bob"]).json()["id"]
    response = client.put(f"/tasks/{task_id}", json={"title": "Mine now"}, headers=auth_headers(org["bob"]))
    assert response.status_code == 403


def test_status_transitions_including_reopen(client, db, org):
    task_id = create_task(client, org["alice"], org["bob"]).json()["id"]

    for status in ("IN_PROGRESS", "COMPLETED", "OPEN"):
        response = client.put(
            f"/tasks/{task_id}/status", json={"status": status}, headers=auth_headers(org["bob"]),
        )
        assert response.status_code == 200
        assert response.json()["status"] == status

    assert db.query(AuditLog).filter(AuditLog.action == "task.status.update").count() == 3


def test_status_update_with_unknown_status(client, org):
    task_id = create_task(client, org["alice"], org["bob"]).json()["id"]
    response = client.put(f"/tasks/{task_id}/status", json={"status": "ARCHIVED"}, headers=auth_headers(org["bob"]))
    assert response.status_code == 422


def test_status_update_revalidates(client, db, org):
    task_id = create_task(client, org["alice"], org["bob"]).json()["id"]
    HierarchyManager(db).remove_manager(org["bob"].id)

    response = client.put(
        f"/tasks/{task_id}/status", json={"status": "COMPLETED"}, headers=auth_headers(org["bob"]),
    )
    assert response.status_code == 400


def test_task_hidden_from_non_participants(client, org):
    task_id = create_task(client, org["alice"], org["bob"]).json()["id"]

    assert client.get(f"/tasks/{task_id}", headers=auth_headers(org["bob"])).status_code == 200
    response = client.get(f"/tasks/{task_id}", headers=auth_headers(org["carol"]))
    assert response.status_code == 404
    assert response.json()["code"] == "TASK_NOT_FOUND"


def test_admin_can_view_any_task(client, admin, org):
    task_id = create_task(client, org["alice"], org["bob"]).json()["id"]
    assert client.get(f"/tasks/{task_id}", headers=auth_headers(admin)).status_code == 200


def test_comments(client, db, org):
    task_id = create_task(client, org["alice"], org["bob"]).json()["id"]

    first = client.post(f"/tasks/{task_id}/comments", json={"comment": "Requested from applicant"}, headers=auth_headers(org["bob"]))
    second = client.post(f"/tasks/{task_id}/comments", json={"comment": "  Received  "}, headers=auth_headers(org["alice"]))
    assert first.status_code == 201
    assert second.json()["comment"] == "Received"

    listing = client.get(f"/tasks/{task_id}/comments", headers=auth_headers(org["bob"]))
    assert [c["comment"] for c in listing.json()] == ["Requested from applicant", "Received"]
    assert listing.json()[0]["creator"]["name"] == "Bob"


def test_blank_comment_is_rejected(client, org):
    task_id = create_task(client, org["alice"], org["bob"]).json()["id"]
    response = client.post(f"/tasks/{task_id}/comments", json={"comment": "   "}, headers=auth_headers(org["bob"]))
    assert response.status_code == 422


def test_outsider_cannot_comment(client, org):
    task_id = create_task(client, org["alice"], org["bob"]).json()["id"]
    response = client.post(f"/tasks/{task_id}/comments", json={"comment": "Hi"}, headers=auth_headers(org["dave"]))
    assert response.status_code == 404


def test_delete_task_removes_comments(client, db, org):
    task_id = create_task(client, org["alice"], org["bob"]).json()["id"]
    client.post(f"/tasks/{task_id}/comments", json={"comment": "Noted"}, headers=auth_headers(org["bob"]))

    assert client.delete(f"/tasks/{task_id}", headers=auth_headers(org["bob"])).status_code == 403
    assert client.delete(f"/tasks/{task_id}", headers=auth_headers(org["alice"])).status_code == 204

    assert client.get(f"/tasks/{task_id}", headers=auth_headers(org["alice"])).status_code == 404
    assert db.query(TaskComment).count() == 0


def test_my_tasks_ordered_by_priority(client, org):
    for title, priority in (("Low", "LOW"), ("High", "HIGH"), ("Medium", "MEDIUM")):
        create_task(client, org["carol"], org["carol"], task_type="PERSONAL", direction=None, title=title, priority=priority)

    response = client.get("/tasks/my", headers=auth_headers(org["carol"]))
    assert [t["title"] for t in response.json()] == ["High", "Medium", "Low"]

    filtered = client.get("/tasks/my", params={"priority": "LOW"}, headers=auth_headers(org["carol"]))
    assert [t["title"] for t in filtered.json()] == ["Low"]


def test_assigned_by_me(client, org):
    create_task(client, org["alice"], org["bob"], title="One")
    create_task(client, org["alice"], org["carol"], title="Two")
    create_task(client, org["bob"], org["dave"], title="Three")

    response = client.get("/tasks/assigned-by-me", headers=auth_headers(org["alice"]))
    assert sorted(t["title"] for t in response.json()) == ["One", "Two"]


def test_subordinate_tasks_include_indirect_reports(client, org):
    create_task(client, org["bob"], org["dave"], title="For Dave")
    create_task(client, org["carol"], org["carol"], task_type="PERSONAL", direction=None, title="Carol's own")

    response = client.get("/tasks/subordinates", headers=auth_headers(org["alice"]))
    assert response.status_code == 200
    assert sorted(t["title"] for t in response.json()) == ["Carol's own", "For Dave"]

    assert client.get("/tasks/subordinates", headers=auth_headers(org["dave"])).status_code == 403


def test_subordinate_tasks_filtered_to_one_report(client, org):
    create_task(client, org["bob"], org["dave"], title="For Dave")
    create_task(client, org["alice"], org["carol"], title="For Carol")

    response = client.get(
        "/tasks/subordinates", params={"subordinate_id": org["dave"].id}, headers=auth_headers(org["alice"]),
    )
    assert response.status_code == 200
    assert [t["title"] for t in response.json()] == ["For Dave"]

    # Carol reports to Alice, not to Bob
    outside = client.get(
        "/tasks/subordinates", params={"subordinate_id": org["carol"].id}, headers=auth_headers(org["bob"]),
    )
    assert outside.status_code == 403
    assert outside.json()["code"] == "PERMISSION_DENIED"
