"""
Tests for admin login, dashboard, approval and plan grants.
"""
from datetime import datetime

import pytest

from jobfit.core.config import ADMIN_COOKIE_NAME
from jobfit.db.models.resume_generation import ResumeGeneration
from jobfit.db.models.system_activity import SystemActivity
from jobfit.db.models.user import UserStatus, PlanType

from conftest import FIXED_NOW, login_as_admin


@pytest.fixture(autouse=True)
def admin_password(monkeypatch):
    monkeypatch.setattr("jobfit.api.routes.admin.ADMIN_PASSWORD", "s3cret-admin")


def _generation(db, user=None, created_at=FIXED_NOW, score=80):
    record = ResumeGeneration(
        user_id=user.id if user else None,
        user_email=user.email if user else "Anonymous",
        job_title="Engineer",
        company_name="Acme",
        match_score=score,
        original_name="resume.docx",
        file_data="ZG9jeA==",
        created_at=created_at,
        updated_at=created_at,
    )
    db.add(record)
    db.commit()
    return record


def test_admin_login(client):
    response = client.post("/api/admin/login", json={"password": "s3cret-admin"})
    assert response.status_code == 200
    assert ADMIN_COOKIE_NAME in response.cookies
    assert client.get("/api/admin/dashboard").status_code == 200


def test_admin_login_wrong_password(client):
    response = client.post("/api/admin/login", json={"password": "guess"})
    assert response.status_code == 401


def test_admin_routes_require_cookie(client, make_user):
    user = make_user()
    assert client.get("/api/admin/dashboard").status_code == 401
    assert client.post("/api/admin/grant-plan", json={"userId": user.id, "plan": "PRO"}).status_code == 401


def test_user_session_is_not_admin(client, make_user):
    from conftest import login_as
    login_as(client, make_user())
    assert client.get("/api/admin/dashboard").status_code == 401


def test_grant_plan(client, db, make_user):
    user = make_user(plan=PlanType.NONE, has_full_access=False, credits_used=3, daily_resume_count=2)
    login_as_admin(client)
    
    response = client.post("/api/admin/grant-plan", json={"userId": user.id, "plan": "PRO"})
    
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["user"]["plan"] == "PRO"
    db.refresh(user)
    assert user.plan == PlanType.PRO
    assert user.has_full_access is True
    assert user.credits_used == 0
    assert user.daily_resume_count == 0
    assert db.query(SystemActivity).filter_by(user_id=user.id, action="GRANT_PLAN").count() == 1


def test_grant_plan_validation(client, make_user):
    user = make_user()
    login_as_admin(client)
    
    assert client.post("/api/admin/grant-plan", json={"plan": "PRO"}).status_code == 400
    invalid = client.post("/api/admin/grant-plan", json={"userId": user.id, "plan": "ENTERPRISE"})
    assert invalid.status_code == 400
    assert invalid.json()["detail"] == "Invalid plan. Must be FREE or PRO"
    assert client.post("/api/admin/grant-plan", json={"userId": 9999, "plan": "FREE"}).status_code == 404


def test_approve_and_reject(client, db, make_user):
    user = make_user(status=UserStatus.PENDING)
    login_as_admin(client)
    
    response = client.post("/api/admin/approve-user", json={"userId": user.id, "action": "APPROVE"})
    assert response.status_code == 200
    assert response.json()["user"]["status"] == "APPROVED"
    
    response = client.post("/api/admin/approve-user", json={"userId": user.id, "action": "REJECT"})
    db.refresh(user)
    assert user.status == UserStatus.REJECTED


def test_dashboard_prunes_expired_records(client, db, make_user):
    user = make_user()
    _generation(db, user, score=90)
    _generation(db, None, score=70)
    _generation(db, user, created_at=datetime(2025, 9, 1, 12, 0), score=10)
    login_as_admin(client)
    
    response = client.get("/api/admin/dashboard")
    
    assert response.status_code == 200
    body = response.json()
    assert body["prunedCount"] == 1
    assert body["totalResumes"] == 2
    assert body["totalUsers"] == 1
    assert body["avgScore"] == 80
    assert len(body["logs"]) == 2
    assert body["users"][0]["creditLimit"] == 5


def test_admin_logout(client):
    client.post("/api/admin/login", json={"password": "s3cret-admin"})
    client.post("/api/admin/logout")
    assert client.get("/api/admin/dashboard").status_code == 401
