"""
Generated resume history and downloads.
"""
import base64
import binascii
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from jobfit.core.auth_dependency import get_db, get_current_user_obj
from jobfit.core.config import HISTORY_PAGE_LIMIT
from jobfit.db.models.resume_generation import ResumeGeneration
from jobfit.db.models.user import User
from jobfit.services.docx_service import DOCX_MEDIA_TYPE, sanitize_filename_component

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/resumes", tags=["Resumes"])


@router.get("")
def list_resumes(user: User = Depends(get_current_user_obj), db: Session = Depends(get_db)):
    """The caller's most recent generations, newest first (documents not included)."""
    generations = (
        db.query(ResumeGeneration)
        .filter(ResumeGeneration.user_id == user.id)
        .order_by(ResumeGeneration.created_at.desc(), ResumeGeneration.id.desc())
        .limit(HISTORY_PAGE_LIMIT)
        .all()
    )
    return {
        "resumes": [
            {
                "id": g.id,
                "createdAt": g.created_at.isoformat() if g.created_at else None,
                "jobTitle": g.job_title,
                "companyName": g.company_name,
                "matchScore": g.match_score,
                "originalName": g.original_name,
                "status": g.status.value,
                "hasFile": bool(g.file_data),
            }
            for g in generations
        ]
    }


@router.get("/download")
def download_resume(
    id: Optional[int] = Query(None, description="Generation record ID"),
    filename: str = Query("resume.docx"),
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db),
):
    if id is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Resume ID is required")
    
    generation = db.get(ResumeGeneration, id)
    if not generation:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resume not found")
    
    if generation.user_id != user.id:
        logger.warning(f"Download refused: record_id={id}, owner={generation.user_id}, caller={user.id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Unauthorized - This resume doesn't belong to you",
        )
    
    if not generation.file_data:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resume file data not found")
    
    try:
        content = base64.b64decode(generation.file_data)
    except (binascii.Error, ValueError):
        logger.error(f"Stored document is corrupted: record_id={id}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to download resume")
    
    stem = filename[:-5] if filename.lower().endswith(".docx") else filename
    safe_name = f"{sanitize_filename_component(stem) or 'resume'}.docx"
    return Response(
        content=content,
        media_type=DOCX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{safe_name}"'},
    )
