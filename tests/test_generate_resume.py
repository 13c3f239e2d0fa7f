"""
Tests for POST /api/generate-resume.
"""
import base64
import json

from jobfit.db.models.resume_generation import ResumeGeneration, GenerationStatus
from jobfit.db.models.user import PlanType
from jobfit.llm.provider import LLMProviderError
from jobfit.llm.router import get_ai_client
from jobfit.main import app
from jobfit.services.docx_service import extract_docx_text

from conftest import GOOD_ANSWER, TODAY, YESTERDAY, build_docx, login_as, make_ai_client


def _post(client, template, job_description="Python backend engineer, FastAPI, PostgreSQL", **fields):
    data = {"jobDescription": job_description, **fields}
    files = {"resume": ("my_resume.docx", template, "application/octet-stream")} if template is not None else None
    return client.post("/api/generate-resume", data=data, files=files)


def test_free_user_generates_and_is_charged(client, db, make_user, template_docx, ai):
    """Free user with full access and one credit left: document returned, counters advance."""
    user = make_user(credits_used=4, daily_resume_count=2, last_resume_date=TODAY)
    login_as(client, user)
    
    response = _post(client, template_docx, companyName="Acme", jobTitle="Backend Engineer")
    
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["analysis"]["matchScore"] == 82
    assert body["fileName"] == "Jane_Doe_Acme_Backend_Engineer_resume.docx"
    assert body["model"] == "scripted:model-a"
    assert body["warnings"] == []
    
    text, _ = extract_docx_text(base64.b64decode(body["fileData"]))
    assert GOOD_ANSWER["replacements"]["summary_bullet_1"] in text
    
    db.refresh(user)
    assert user.credits_used == 5
    assert user.daily_resume_count == 3
    record = db.query(ResumeGeneration).one()
    assert record.user_id == user.id
    assert record.match_score == 82
    assert record.original_name == "my_resume.docx"


def test_plan_limit_denied_without_ai_call(client, db, make_user, template_docx, ai):
    user = make_user(credits_used=5)
    login_as(client, user)
    
    response = _post(client, template_docx)
    
    assert response.status_code == 403
    assert response.json()["reason"] == "plan_limit"
    assert ai.provider.calls == []
    assert db.query(ResumeGeneration).count() == 0
    db.refresh(user)
    assert user.credits_used == 5


def test_no_full_access_denied(client, make_user, template_docx, ai):
    user = make_user(has_full_access=False)
    login_as(client, user)
    
    response = _post(client, template_docx)
    
    assert response.status_code == 403
    body = response.json()
    assert body["error"] == "Access Restricted"
    assert body["reason"] == "no_full_access"
    assert ai.provider.calls == []


def test_stale_daily_counter_rolls_over(client, db, make_user, template_docx):
    """Yesterday's counter at the limit does not block today's first generation."""
    user = make_user(plan=PlanType.PRO, daily_resume_count=70, last_resume_date=YESTERDAY)
    login_as(client, user)
    
    response = _post(client, template_docx)
    
    assert response.status_code == 200
    db.refresh(user)
    assert user.daily_resume_count == 1
    assert user.last_resume_date == TODAY


def test_daily_limit_denied(client, make_user, template_docx):
    user = make_user(plan=PlanType.PRO, daily_resume_count=70, last_resume_date=TODAY)
    login_as(client, user)
    
    response = _post(client, template_docx)
    
    assert response.status_code == 403
    assert response.json()["reason"] == "daily_limit"


def test_fallback_model_answers(client, make_user, template_docx):
    fallback, provider = make_ai_client({
        "model-a": LLMProviderError("HTTP 404: model not found"),
        "model-b": json.dumps(GOOD_ANSWER),
    })
    app.dependency_overrides[get_ai_client] = lambda: fallback
    user = make_user()
    login_as(client, user)
    
    response = _post(client, template_docx)
    
    assert response.status_code == 200
    body = response.json()
    assert body["model"] == "scripted:model-b"
    assert any("fallback" in w for w in body["warnings"])


def test_all_models_fail_charges_nothing(client, db, make_user, template_docx):
    failing, provider = make_ai_client({
        "model-a": LLMProviderError("HTTP 500: internal"),
        "model-b": LLMProviderError("HTTP 500: internal"),
        "model-c": LLMProviderError("HTTP 503: unavailable"),
    })
    app.dependency_overrides[get_ai_client] = lambda: failing
    user = make_user(credits_used=1)
    login_as(client, user)
    
    response = _post(client, template_docx)
    
    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "AI Error: HTTP 503: unavailable"
    assert body["details"].startswith("Failed to generate content.")
    db.refresh(user)
    assert user.credits_used == 1
    assert db.query(ResumeGeneration).count() == 0


def test_missing_job_description(client, template_docx, ai):
    response = _post(client, template_docx, job_description="")
    
    assert response.status_code == 400
    assert response.json()["error"] == "Missing job description or resume file"
    assert ai.provider.calls == []


def test_missing_resume_file(client, ai):
    response = _post(client, None)
    assert response.status_code == 400


def test_anonymous_generation(client, db, template_docx):
    response = _post(client, template_docx)
    
    assert response.status_code == 200
    body = response.json()
    assert body["fileName"] == "User_ResumeLab_Candidate_Application_resume.docx"
    record = db.query(ResumeGeneration).one()
    assert record.user_id is None
    assert record.user_email == "Anonymous"


def test_unreadable_template_still_answers(client, ai):
    """Extraction and templating degrade: the original bytes come back with warnings."""
    response = _post(client, b"not a docx")
    
    assert response.status_code == 200
    body = response.json()
    assert base64.b64decode(body["fileData"]) == b"not a docx"
    assert len(body["warnings"]) == 2
    assert "Could not extract text" in ai.provider.calls[0]["prompt"]


def test_zero_daily_limit_denied_before_ai_call(client, db, make_user, template_docx, ai):
    user = make_user(plan=PlanType.PRO, daily_resume_limit=0)
    login_as(client, user)
    
    response = _post(client, template_docx)
    
    assert response.status_code == 403
    assert response.json()["reason"] == "daily_limit"
    assert ai.provider.calls == []
    assert db.query(ResumeGeneration).count() == 0


def test_new_day_with_fallback_model_updates_counters(client, db, make_user, template_docx):
    """Yesterday's 3 of 50, 1 of 5 credits used, answered by the second model."""
    fallback, provider = make_ai_client({
        "model-a": LLMProviderError("HTTP 429: quota exceeded"),
        "model-b": json.dumps(GOOD_ANSWER),
    })
    app.dependency_overrides[get_ai_client] = lambda: fallback
    user = make_user(
        plan=PlanType.FREE,
        credits_used=1,
        daily_resume_count=3,
        daily_resume_limit=50,
        last_resume_date=YESTERDAY,
    )
    login_as(client, user)
    
    response = _post(client, template_docx)
    
    assert response.status_code == 200
    assert response.json()["model"] == "scripted:model-b"
    assert [c["model"] for c in provider.calls] == ["model-a", "model-b"]
    db.refresh(user)
    assert user.daily_resume_count == 1
    assert user.credits_used == 2
    assert user.last_resume_date == TODAY


def test_templating_failure_returns_original_and_records(client, db, make_user):
    """A readable DOCX with a broken tag: original bytes back, generation still recorded."""
    template = build_docx("Jane Doe, Backend Engineer", "{{ summary_bullet_1 + }}")
    user = make_user(credits_used=0)
    login_as(client, user)
    
    response = _post(client, template)
    
    assert response.status_code == 200
    body = response.json()
    assert base64.b64decode(body["fileData"]) == template
    assert len(body["warnings"]) == 1
    record = db.query(ResumeGeneration).one()
    assert record.status == GenerationStatus.SUCCESS
    assert record.match_score == 82
    db.refresh(user)
    assert user.credits_used == 1


def test_consecutive_generations_charge_one_credit_each(client, db, make_user, template_docx):
    user = make_user(plan=PlanType.PRO, credits_used=10, daily_resume_count=0, last_resume_date=TODAY)
    login_as(client, user)
    
    for _ in range(3):
        assert _post(client, template_docx).status_code == 200
    
    db.refresh(user)
    assert user.credits_used == 13
    assert user.daily_resume_count == 3
    assert db.query(ResumeGeneration).filter_by(user_id=user.id).count() == 3


def test_non_finite_score_falls_back_to_next_model(client, make_user, template_docx):
    fallback, provider = make_ai_client({
        "model-a": '{"matchScore": 1e999, "replacements": {}}',
        "model-b": json.dumps(GOOD_ANSWER),
    })
    app.dependency_overrides[get_ai_client] = lambda: fallback
    login_as(client, make_user())
    
    response = _post(client, template_docx)
    
    assert response.status_code == 200
    assert response.json()["model"] == "scripted:model-b"
    assert [c["model"] for c in provider.calls] == ["model-a", "model-b"]
