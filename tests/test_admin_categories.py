"""Admin category moderation tests."""

from unittest.mock import patch

import pytest

from marketplace.models.category import Category, CategorySkill
from marketplace.models.project import Project
from marketplace.services.category_service import CategoryService
from marketplace.services.skills import get_category_skill_names

ADMIN_URL = "/api/v1/admin/categories"


@pytest.fixture
def linked_suggestion(client, auth_headers, create_project):
    """A pending suggestion linked to a freshly created project."""

    def _create(name: str = "Drones", skills: tuple[str, ...] = ("Pilotaje", "React")):
        response = client.post("/api/v1/categories", headers=auth_headers, json={"name": name})
        category = response.json()["category"]
        project = create_project(
            category="Otro", skills_required=list(skills), suggested_category_id=category["id"]
        )
        return category, project

    return _create


def moderate(client, headers, **body):
    return client.patch(ADMIN_URL, headers=headers, json=body)


def test_admin_routes_require_admin(client, auth_headers):
    assert client.get(ADMIN_URL).status_code == 401
    assert client.get(ADMIN_URL, headers=auth_headers).status_code == 403
    assert moderate(client, auth_headers, id=1, action="approve").status_code == 403
    assert client.delete(ADMIN_URL, headers=auth_headers, params={"id": 1}).status_code == 403


def test_list_for_admin(client, admin_headers, approved_category, linked_suggestion):
    """Pending suggestions come first with suggester and project context."""
    approved_category()
    category, project = linked_suggestion()

    response = client.get(ADMIN_URL, headers=admin_headers)
    assert response.status_code == 200
    categories = response.json()["categories"]
    assert [c["name"] for c in categories] == ["Drones", "Desarrollo Web"]

    pending = categories[0]
    assert pending["status"] == "pending"
    assert pending["suggested_by_name"] == "Employer"
    assert pending["suggested_by_email"] == "employer@example.com"
    assert pending["suggested_skills"] == ["Pilotaje", "React"]
    assert pending["related_project"]["id"] == project["id"]
    assert pending["related_project"]["employer_name"] == "Employer"

    approved = categories[1]
    assert approved["related_project"] is None
    assert [s["name"] for s in approved["skills"]] == ["React", "Python"]


def test_approve_suggestion(client, admin_headers, linked_suggestion, db):
    """Approval files the linked project under the category with the approved skills."""
    category, project = linked_suggestion()

    response = moderate(
        client, admin_headers, id=category["id"], action="approve", approved_skills=["Pilotaje"]
    )
    assert response.status_code == 200
    data = response.json()
    assert data["category"]["status"] == "approved"
    assert data["message"] == 'Category "Drones" approved'

    db.expire_all()
    stored_project = db.get(Project, project["id"])
    assert stored_project.category == "Drones"
    assert stored_project.suggested_category_name is None
    assert stored_project.suggested_skills is None
    assert stored_project.skills_required == ["Pilotaje"]
    assert get_category_skill_names(db, category["id"]) == ["Pilotaje"]


def test_approve_with_new_name(client, admin_headers, linked_suggestion, db):
    category, project = linked_suggestion()

    response = moderate(
        client, admin_headers, id=category["id"], action="approve", new_name="  Drones y UAV "
    )
    assert response.status_code == 200
    assert response.json()["category"]["name"] == "Drones y UAV"
    assert response.json()["category"]["slug"] == "drones-y-uav"

    db.expire_all()
    assert db.get(Project, project["id"]).category == "Drones y UAV"


def test_approve_ignores_too_short_new_name(client, admin_headers, linked_suggestion):
    category, _ = linked_suggestion()
    response = moderate(client, admin_headers, id=category["id"], action="approve", new_name="x")
    assert response.status_code == 200
    assert response.json()["category"]["name"] == "Drones"


def test_approve_rename_conflict_keeps_pending(
    client, admin_headers, approved_category, linked_suggestion, db
):
    approved_category("Pintura", ())
    category, project = linked_suggestion()

    response = moderate(
        client, admin_headers, id=category["id"], action="approve", new_name="pintura"
    )
    assert response.status_code == 409
    assert "pintura" in response.json()["error"]

    db.expire_all()
    assert db.get(Category, category["id"]).status == "pending"
    assert db.get(Project, project["id"]).category == "Otro"


def test_approve_rename_unique_index_conflict(
    client, admin_headers, approved_category, linked_suggestion, db
):
    """A slug taken after the lookup is still reported by the unique index as 409."""
    approved_category("Diseno Grafico", ())
    category, project = linked_suggestion()

    with patch.object(CategoryService, "_slug_taken", return_value=False):
        response = moderate(
            client, admin_headers, id=category["id"], action="approve", new_name="Diseno Grafico"
        )
    assert response.status_code == 409
    assert response.json()["code"] == "ConflictError"

    db.expire_all()
    assert db.get(Category, category["id"]).status == "pending"
    assert db.get(Project, project["id"]).category == "Otro"


def test_approve_twice_conflicts(client, admin_headers, linked_suggestion):
    category, _ = linked_suggestion()
    assert moderate(client, admin_headers, id=category["id"], action="approve").status_code == 200
    assert moderate(client, admin_headers, id=category["id"], action="approve").status_code == 409


def test_approve_missing_category(client, admin_headers):
    assert moderate(client, admin_headers, id=9999, action="approve").status_code == 404


def test_reassign_merges_skills(client, admin_headers, approved_category, linked_suggestion, db):
    """The project joins the existing category; its skills are the merged set."""
    target = approved_category()
    category, project = linked_suggestion()

    response = moderate(
        client,
        admin_headers,
        id=category["id"],
        action="reassign",
        existing_category_id=target.id,
        approved_skills=["React", "Docker"],
    )
    assert response.status_code == 200
    assert response.json()["category"]["id"] == target.id
    assert response.json()["message"] == 'Suggestion merged into "Desarrollo Web"'

    db.expire_all()
    assert db.get(Category, category["id"]) is None
    stored_project = db.get(Project, project["id"])
    assert stored_project.category == "Desarrollo Web"
    assert stored_project.suggested_category_name is None
    assert stored_project.skills_required == ["React", "Python", "Docker"]
    assert get_category_skill_names(db, target.id) == ["React", "Python", "Docker"]


def test_reassign_is_idempotent_for_skills(
    client, admin_headers, approved_category, linked_suggestion, db
):
    """Reassigning the same skill repeatedly never stores it twice."""
    target = approved_category()
    for name in ("Drones", "Robots"):
        category, _ = linked_suggestion(name)
        response = moderate(
            client,
            admin_headers,
            id=category["id"],
            action="reassign",
            existing_category_id=target.id,
            approved_skills=["Docker", "Docker"],
        )
        assert response.status_code == 200

    names = get_category_skill_names(db, target.id)
    assert names.count("Docker") == 1
    assert db.query(CategorySkill).filter(CategorySkill.category_id == target.id).count() == 3


def test_reassign_keeps_case_variants(
    client, admin_headers, approved_category, linked_suggestion, db
):
    """Stored skills compare exactly, so a different case is a different skill."""
    target = approved_category()
    category, _ = linked_suggestion()
    moderate(
        client,
        admin_headers,
        id=category["id"],
        action="reassign",
        existing_category_id=target.id,
        approved_skills=["react"],
    )
    assert get_category_skill_names(db, target.id) == ["React", "Python", "react"]


def test_reassign_requires_target(client, admin_headers, linked_suggestion):
    category, _ = linked_suggestion()
    response = moderate(client, admin_headers, id=category["id"], action="reassign")
    assert response.status_code == 400


def test_reassign_to_pending_or_self(client, admin_headers, linked_suggestion):
    category, _ = linked_suggestion()
    other, _ = linked_suggestion("Robots")

    for target_id in (category["id"], other["id"]):
        response = moderate(
            client,
            admin_headers,
            id=category["id"],
            action="reassign",
            existing_category_id=target_id,
        )
        assert response.status_code == 400


def test_reassign_missing_target(client, admin_headers, linked_suggestion):
    category, _ = linked_suggestion()
    response = moderate(
        client, admin_headers, id=category["id"], action="reassign", existing_category_id=9999
    )
    assert response.status_code == 404


def test_reject_suggestion(client, admin_headers, linked_suggestion, db):
    """Rejecting deletes the suggestion; the project keeps its placeholder category."""
    category, project = linked_suggestion()

    response = client.delete(ADMIN_URL, headers=admin_headers, params={"id": category["id"]})
    assert response.status_code == 200

    db.expire_all()
    assert db.get(Category, category["id"]) is None
    assert db.get(Project, project["id"]).category == "Otro"

    response = client.delete(ADMIN_URL, headers=admin_headers, params={"id": category["id"]})
    assert response.status_code == 404


def test_reject_approved_category(client, admin_headers, approved_category):
    category = approved_category()
    response = client.delete(ADMIN_URL, headers=admin_headers, params={"id": category.id})
    assert response.status_code == 409


def test_skill_preview(client, admin_headers, approved_category, linked_suggestion):
    """Preview flags skills the target already has, ignoring case."""
    target = approved_category()
    category, _ = linked_suggestion(skills=("react", "Docker"))

    response = client.get(
        f"{ADMIN_URL}/{category['id']}/skill-preview",
        headers=admin_headers,
        params={"target_category_id": target.id},
    )
    assert response.status_code == 200
    assert response.json()["skills"] == [
        {"name": "react", "is_duplicate": True},
        {"name": "Docker", "is_duplicate": False},
    ]
