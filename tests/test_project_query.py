"""Tests for the project listing query builder."""

from marketplace.models.enums import ProjectStatus
from marketplace.models.project import Project
from marketplace.models.user import User
from marketplace.services.project_query import (
    MAX_PAGE_NUMBER,
    MAX_PAGE_SIZE,
    ProjectFilters,
    ProjectQuery,
    parse_skills,
)


def make_employer(db, email="owner@example.com"):
    user = User(email=email, name="Owner")
    db.add(user)
    db.commit()
    return user


def make_project(db, employer, **fields):
    values = {
        "title": "Some project",
        "description": "A description that is long enough.",
        "category": "Desarrollo Web",
        "budget": 100000,
        "employer_id": employer.id,
        "status": ProjectStatus.OPEN.value,
        "skills_required": ["React"],
    }
    values.update(fields)
    project = Project(**values)
    db.add(project)
    db.commit()
    return project


def ids(db, **filters):
    return [p.id for p in ProjectQuery(db, ProjectFilters(**filters)).fetch().items]


def test_parse_skills():
    assert parse_skills("React, Node ,, ") == ["React", "Node"]
    assert parse_skills("") == []
    assert parse_skills(None) == []


def test_page_size_is_clamped():
    assert ProjectFilters(limit=100).page_size == MAX_PAGE_SIZE
    assert ProjectFilters(limit=0).page_size == 1
    assert ProjectFilters(page=0).page_number == 1
    assert ProjectFilters(page=10**20).page_number == MAX_PAGE_NUMBER


def test_default_filter_is_open_status(db):
    owner = make_employer(db)
    open_project = make_project(db, owner)
    make_project(db, owner, status=ProjectStatus.CLOSED.value)

    query = ProjectQuery(db, ProjectFilters())
    assert len(query.predicates()) == 1
    assert [p.id for p in query.fetch().items] == [open_project.id]


def test_each_filter_adds_a_predicate():
    filters = ProjectFilters(
        search="web", category="Pintura", budget_min=1, budget_max=2, skills=["React"]
    )
    assert len(ProjectQuery(None, filters).predicates()) == 6


def test_search_is_case_insensitive_and_escaped(db):
    owner = make_employer(db)
    percent = make_project(db, owner, title="Discount 100% off banner")
    make_project(db, owner, title="Discount 1000 banners")

    assert ids(db, search="discount") == [
        p.id for p in db.query(Project).order_by(Project.id.desc()).all()
    ]
    assert ids(db, search="100%") == [percent.id]
    assert ids(db, search="_") == []


def test_search_matches_description(db):
    owner = make_employer(db)
    project = make_project(db, owner, description="We need a Shopify expert for our store.")
    assert ids(db, search="shopify") == [project.id]


def test_budget_range_is_inclusive(db):
    owner = make_employer(db)
    low = make_project(db, owner, budget=100)
    mid = make_project(db, owner, budget=200)
    make_project(db, owner, budget=300)

    assert ids(db, budget_min=100, budget_max=200) == [mid.id, low.id]


def test_skills_overlap(db):
    owner = make_employer(db)
    react = make_project(db, owner, skills_required=["React", "CSS"])
    vue = make_project(db, owner, skills_required=["Vue"])
    make_project(db, owner, skills_required=["Go"])

    assert ids(db, skills=["CSS", "Vue"]) == [vue.id, react.id]
    # Exact names only
    assert ids(db, skills=["css"]) == []


def test_user_filter_replaces_status(db):
    owner = make_employer(db)
    other = make_employer(db, "other@example.com")
    closed = make_project(db, owner, status=ProjectStatus.CLOSED.value)
    make_project(db, other)

    assert ids(db, user_id=owner.id) == [closed.id]


def test_limit_above_maximum_is_capped(db):
    owner = make_employer(db)
    for i in range(MAX_PAGE_SIZE + 1):
        db.add(
            Project(
                title=f"Bulk project {i}",
                employer_id=owner.id,
                status=ProjectStatus.OPEN.value,
                budget=1000,
            )
        )
    db.commit()

    page = ProjectQuery(db, ProjectFilters(limit=100)).fetch()
    assert len(page.items) == MAX_PAGE_SIZE
    assert page.total_count == MAX_PAGE_SIZE + 1
    assert page.total_pages == 2
    assert page.limit == MAX_PAGE_SIZE


def test_limit_capped_over_http(client, db):
    owner = make_employer(db)
    for i in range(MAX_PAGE_SIZE + 1):
        db.add(Project(title=f"Bulk project {i}", employer_id=owner.id, status="open"))
    db.commit()

    data = client.get("/api/v1/projects", params={"limit": 100}).json()
    assert data["count"] == MAX_PAGE_SIZE
    assert data["total_pages"] == 2


def test_empty_result(db):
    page = ProjectQuery(db, ProjectFilters(search="nothing")).fetch()
    assert page.items == []
    assert page.total_count == 0
    assert page.total_pages == 0


def test_huge_page_returns_empty_page(client, db):
    make_project(db, make_employer(db))

    response = client.get("/api/v1/projects", params={"page": 10**20})
    assert response.status_code == 200
    data = response.json()
    assert data["projects"] == []
    assert data["current_page"] == MAX_PAGE_NUMBER
    assert data["total_pages"] == 1
