"""
Pydantic schemas for resume generation.
"""
import math
from typing import Dict, List, Any
from pydantic import BaseModel, Field, ConfigDict, field_validator


class ResumeAnalysis(BaseModel):
    """AI answer for one resume/job-description pair."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    match_score: int = Field(0, alias="matchScore", description="Match score 0-100")
    resume_summary: str = Field("", alias="resumeSummary", description="Professional summary")
    missing_keywords: List[str] = Field(default_factory=list, alias="missingKeywords")
    insights_and_recommendations: List[str] = Field(default_factory=list, alias="insightsAndRecommendations")
    replacements: Dict[str, str] = Field(
        default_factory=dict,
        description="Template placeholder name -> replacement text",
    )

    @field_validator("match_score", mode="before")
    @classmethod
    def clamp_match_score(cls, v: Any) -> int:
        """Scores arrive as ints, floats or numeric strings; clamp to 0-100."""
        if v is None or v == "":
            return 0
        try:
            score = float(v)
        except (TypeError, ValueError):
            raise ValueError(f"matchScore is not a number: {v!r}")
        if not math.isfinite(score):
            raise ValueError("matchScore must be a finite number")
        return max(0, min(100, int(round(score))))

    @field_validator("replacements", mode="before")
    @classmethod
    def stringify_replacements(cls, v: Any) -> Dict[str, str]:
        if v is None:
            return {}
        if not isinstance(v, dict):
            raise ValueError("replacements must be an object")
        return {str(key): "" if value is None else str(value) for key, value in v.items()}

    @field_validator("missing_keywords", "insights_and_recommendations", mode="before")
    @classmethod
    def coerce_string_list(cls, v: Any) -> List[str]:
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return [str(item) for item in v]


class GenerationResponse(BaseModel):
    """Response schema for POST /api/generate-resume."""
    success: bool = True
    analysis: Dict[str, Any]
    fileData: str = Field(..., description="Base64-encoded DOCX")
    fileName: str
    model: str = Field(..., description="provider:model that produced the answer")
    warnings: List[str] = Field(default_factory=list, description="Best-effort steps that degraded")

    class Config:
        json_schema_extra = {
            "example": {
                "success": True,
                "analysis": {
                    "matchScore": 82,
                    "resumeSummary": "Backend engineer with 6 years of Python...",
                    "missingKeywords": ["Kubernetes"],
                    "insightsAndRecommendations": ["Quantify the migration project"],
                    "replacements": {"summary_bullet_1": "Led the migration of..."},
                },
                "fileData": "UEsDBBQABgAIAAAAIQ...",
                "fileName": "Jane_Acme_Backend_Engineer_resume.docx",
                "model": "gemini:gemini-2.5-flash-lite",
                "warnings": [],
            }
        }
