"""
Resume generation workflow.

One request-scoped pass: validate, gate, extract text, prompt the AI
fallback chain, fill the template, re-gate, persist and charge the quota.

Only three steps can fail the request: input validation, the AI chain
(all models exhausted) and the access gate. Extraction, templating and
bookkeeping degrade instead and report through ``GenerationResult.warnings``.
"""
import json
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from jobfit.core.access_gate import enforce_access
from jobfit.core.config import MAX_RESUME_TEXT_CHARS, REQUIRE_LOGIN_FOR_GENERATION
from jobfit.core.errors import MissingInputError
from jobfit.db.models.user import User
from jobfit.llm.router import ModelFallbackClient
from jobfit.schemas.generation import ResumeAnalysis
from jobfit.services import quota_service
from jobfit.services.docx_service import (
    build_output_filename,
    extract_docx_text,
    render_docx_template,
)

logger = logging.getLogger(__name__)

DEFAULT_COMPANY_NAME = "ResumeLab"
DEFAULT_JOB_TITLE = "Candidate Application"

_LEADING_FENCE_RE = re.compile(r"\A\s*```(?:json)?[ \t]*\n?", re.IGNORECASE)
_TRAILING_FENCE_RE = re.compile(r"\n?[ \t]*```\s*\Z")

PROMPT_TEMPLATE = """You are an expert ATS (Applicant Tracking System) Scanner and Professional Resume Writer.

Your task is to:
1. READ the Job Description and the Resume Content below.
2. CALCULATE a REAL Match Score (0-100) based on strict keyword matching and experience alignment.
3. GENERATE highly effective, optimized content to fill the placeholders in the resume.

JOB DESCRIPTION:
{job_description}

RESUME CONTENT (Extracted Text):
{resume_text}

RESUME FILE NAME: {file_name}

CRITICAL FORMATTING RULES:
- DO NOT use any markdown formatting symbols like **, ##, __, or any special characters
- Write in plain text only
- Each bullet point should be a complete, detailed sentence
- Use strong action verbs at the start of each bullet
- Content must be professional and quantifiable

REQUIRED JSON OUTPUT FORMAT:
{{
  "matchScore": (Integer 0-100),
  "resumeSummary": "Professional summary text...",
  "missingKeywords": ["keyword1", "keyword2"],
  "insightsAndRecommendations": ["advice1", "advice2"],
  "replacements": {{
      "summary_bullet_1": "Optimized content...",
      "exp2_bullet_1": "Optimized content..."
  }}
}}

The "replacements" keys must be the placeholder names found between {{{{ and }}}} in the resume.

Respond ONLY with valid JSON."""


@dataclass
class GenerationRequest:
    job_description: Optional[str]
    template: Optional[bytes]
    file_name: str = "resume.docx"
    job_title: Optional[str] = None
    company_name: Optional[str] = None


@dataclass
class GenerationResult:
    analysis: ResumeAnalysis
    document: bytes
    file_name: str
    model: str
    record_id: Optional[int] = None
    warnings: List[str] = field(default_factory=list)


def build_prompt(job_description: str, resume_text: str, file_name: str) -> str:
    """Deterministic instruction prompt; resume text is truncated to ``MAX_RESUME_TEXT_CHARS``."""
    return PROMPT_TEMPLATE.format(
        job_description=job_description,
        resume_text=resume_text[:MAX_RESUME_TEXT_CHARS],
        file_name=file_name,
    )


def parse_analysis(raw_text: str) -> ResumeAnalysis:
    """
    Parse the model's JSON answer, tolerating a markdown fence around it.

    Only a fence wrapping the whole answer is removed; backticks inside
    string values are kept.

    Raises:
        ValueError: the answer is not a JSON object matching ResumeAnalysis
    """
    cleaned = _LEADING_FENCE_RE.sub("", raw_text or "", count=1)
    cleaned = _TRAILING_FENCE_RE.sub("", cleaned, count=1).strip()
    data = json.loads(cleaned)
    if not isinstance(data, dict):
        raise ValueError("AI answer is not a JSON object")
    return ResumeAnalysis.model_validate(data)


def generate_resume(
    db: Session,
    request: GenerationRequest,
    user: Optional[User],
    ai_client: ModelFallbackClient,
    current: datetime,
    require_login: bool = REQUIRE_LOGIN_FOR_GENERATION,
) -> GenerationResult:
    """
    Run one resume generation end to end.

    Args:
        db: Database session
        request: Uploaded template and job details
        user: Acting user, or None for anonymous callers
        ai_client: Model fallback chain
        current: Current local instant (day boundary for quotas)
        require_login: Refuse anonymous callers

    Returns:
        GenerationResult with the rendered document and analysis

    Raises:
        MissingInputError: template or job description missing
        AuthRequiredError / AccessDeniedError: gate denied the request
        AIGenerationError: every configured model failed
    """
    if not request.template or not (request.job_description or "").strip():
        raise MissingInputError()

    company_name = request.company_name or DEFAULT_COMPANY_NAME
    job_title = request.job_title or DEFAULT_JOB_TITLE
    warnings: List[str] = []

    # Pre-flight gate: a denied user must not spend external AI quota
    enforce_access(user, current, require_login=require_login)

    resume_text, warning = extract_docx_text(request.template)
    if warning:
        warnings.append(warning)

    prompt = build_prompt(request.job_description, resume_text, request.file_name)
    logger.info(
        f"Generating resume: user_id={user.id if user else None}, company={company_name!r}, "
        f"title={job_title!r}, template_bytes={len(request.template)}"
    )
    result = ai_client.generate_json(prompt, parse_analysis)
    analysis: ResumeAnalysis = result.value
    if result.failures:
        warnings.append(f"Answered by fallback model {result.candidate} after {len(result.failures)} failed attempt(s).")

    document, warning = render_docx_template(request.template, analysis.replacements)
    if warning:
        warnings.append(warning)

    if user is not None:
        # Counters may have moved while the AI call was in flight
        db.refresh(user)
        enforce_access(user, current, require_login=require_login)
        try:
            quota_service.apply_day_rollover(db, user, current)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Daily rollover failed: user_id={user.id}, error={e}", exc_info=True)

    record = quota_service.record_generation(
        db,
        user,
        job_title=job_title,
        company_name=company_name,
        match_score=analysis.match_score,
        original_name=request.file_name,
        document=document,
        current=current,
        warnings=warnings,
    )

    file_name = build_output_filename(user.display_name if user else "User", company_name, job_title)
    return GenerationResult(
        analysis=analysis,
        document=document,
        file_name=file_name,
        model=str(result.candidate),
        record_id=record.id if record else None,
        warnings=warnings,
    )
