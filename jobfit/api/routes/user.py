"""
Account self-service endpoints.
"""
import json
import logging
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from jobfit.core.auth_dependency import get_db, get_current_user_obj
from jobfit.core.clock import Clock, get_clock
from jobfit.core.config import SESSION_COOKIE_NAME
from jobfit.db.models.user import User
from jobfit.schemas.user import UpdateProfileRequest, UploadPhotoRequest
from jobfit.services import user_service
from jobfit.services.quota_service import get_quota_summary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/user", tags=["User"])


@router.get("/quota", status_code=status.HTTP_200_OK)
def quota(user: User = Depends(get_current_user_obj), clock: Clock = Depends(get_clock)):
    """Plan, credit and daily usage for the dashboard."""
    return get_quota_summary(user, clock())


@router.post("/update-profile")
def update_profile(
    payload: UpdateProfileRequest,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db),
):
    user = user_service.update_profile(db, user, payload.name, payload.email, payload.phone)
    return {
        "success": True,
        "user": {"id": user.id, "name": user.name, "email": user.email, "phone": user.phone},
    }


@router.post("/upload-photo")
def upload_photo(
    payload: UploadPhotoRequest,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db),
):
    user_service.update_profile_photo(db, user, payload.profileImage)
    return {"success": True}


@router.get("/export-data")
def export_data(
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Download the caller's account data as a JSON attachment."""
    current = clock()
    export = user_service.export_user_data(db, user, current)
    return Response(
        content=json.dumps(export, indent=2),
        media_type="application/json",
        headers={
            "Content-Disposition": f'attachment; filename="jobfit-pro-data-{current.date().isoformat()}.json"',
        },
    )


@router.delete("/delete-account")
def delete_account(
    response: Response,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db),
):
    user_service.delete_account(db, user)
    response.delete_cookie(SESSION_COOKIE_NAME, path="/")
    return {"success": True}
