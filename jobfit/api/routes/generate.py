"""
Resume generation endpoint.
"""
import base64
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from jobfit.core.auth_dependency import get_db, get_optional_user
from jobfit.core.clock import Clock, get_clock
from jobfit.core.errors import JobFitError
from jobfit.db.models.user import User
from jobfit.llm.router import ModelFallbackClient, get_ai_client
from jobfit.schemas.generation import GenerationResponse
from jobfit.services.resume_generation_service import GenerationRequest, generate_resume

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Generation"])


@router.post("/generate-resume", status_code=status.HTTP_200_OK, response_model=GenerationResponse)
def generate_resume_endpoint(
    companyName: Optional[str] = Form(None),
    jobTitle: Optional[str] = Form(None),
    jobDescription: Optional[str] = Form(None),
    resume: Optional[UploadFile] = File(None),
    user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
    ai_client: ModelFallbackClient = Depends(get_ai_client),
    clock: Clock = Depends(get_clock),
):
    """
    Tailor an uploaded DOCX template to a job description.
    
    Multipart form: companyName, jobTitle, jobDescription, resume (file).
    Anonymous callers are allowed unless login is required by configuration.
    
    Errors are returned as {error, message, details} with status
    400 (missing input), 401/403 (access denied) or 500 (AI or internal failure).
    """
    template = resume.file.read() if resume is not None else None
    request = GenerationRequest(
        job_description=jobDescription,
        template=template,
        file_name=(resume.filename if resume is not None else None) or "resume.docx",
        job_title=jobTitle,
        company_name=companyName,
    )
    
    try:
        result = generate_resume(db, request, user, ai_client, clock())
    except JobFitError:
        raise
    except Exception as e:
        logger.error(f"Fatal error in resume generation: {e}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to generate resume", "message": str(e)},
        )
    
    return GenerationResponse(
        analysis=result.analysis.model_dump(by_alias=True),
        fileData=base64.b64encode(result.document).decode("ascii"),
        fileName=result.file_name,
        model=result.model,
        warnings=result.warnings,
    )
