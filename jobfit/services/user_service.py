"""
Account lifecycle: signup, login, social-login provisioning and self-service.
"""
import logging
from datetime import datetime
from typing import Dict, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from jobfit.core.config import DEFAULT_DAILY_RESUME_LIMIT
from jobfit.core.security import hash_password, verify_password
from jobfit.db.models.login_history import LoginHistory
from jobfit.db.models.resume_generation import ResumeGeneration
from jobfit.db.models.system_activity import SystemActivity
from jobfit.db.models.user import User, UserStatus, PlanType

logger = logging.getLogger(__name__)


def log_activity(db: Session, user_id: Optional[int], action: str, details: str = None):
    """Add an audit row; committed with the caller's transaction."""
    db.add(SystemActivity(user_id=user_id, action=action, details=details))


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.lower()).first()


def create_user(db: Session, name: str, email: str, password: str, phone: str = None) -> User:
    """
    Register an email/password account.
    
    New accounts are ACTIVE with no plan and no generation access until an
    admin grants a plan.
    
    Raises:
        HTTPException 400: email already registered
    """
    if get_user_by_email(db, email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists")
    
    user = User(
        name=name,
        email=email.lower(),
        phone=phone or None,
        password_hash=hash_password(password),
        status=UserStatus.ACTIVE,
        plan=PlanType.NONE,
        has_full_access=False,
    )
    db.add(user)
    db.flush()
    log_activity(db, user.id, "SIGN_UP", "User created account")
    db.commit()
    db.refresh(user)
    
    logger.info(f"User signed up: user_id={user.id}")
    return user


def authenticate_user(db: Session, email: str, password: str, ip_address: str = None) -> Optional[User]:
    """Verify credentials and record the login; None when they do not match."""
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        logger.warning("Login failed: invalid credentials")
        return None
    
    db.add(LoginHistory(user_id=user.id, ip_address=ip_address))
    db.commit()
    logger.info(f"User logged in: user_id={user.id}")
    return user


def provision_oauth_user(db: Session, email: str, name: str = None, image: str = None) -> User:
    """
    Find or create the account behind a social login.
    
    First login creates an APPROVED account on the FREE plan that still
    needs an admin to open full access.
    """
    user = get_user_by_email(db, email)
    if user:
        return user
    
    user = User(
        email=email.lower(),
        name=name or "",
        password_hash=None,
        profile_image=image,
        status=UserStatus.APPROVED,
        plan=PlanType.FREE,
        has_full_access=False,
        credits_used=0,
        daily_resume_count=0,
        daily_resume_limit=DEFAULT_DAILY_RESUME_LIMIT,
    )
    db.add(user)
    db.flush()
    log_activity(db, user.id, "SIGN_UP", "User created account via social login")
    db.commit()
    db.refresh(user)
    
    logger.info(f"Social-login user provisioned: user_id={user.id}")
    return user


def update_profile(db: Session, user: User, name: Optional[str], email: str, phone: Optional[str]) -> User:
    """
    Raises:
        HTTPException 400: email belongs to another account
    """
    email = email.lower()
    if email != user.email:
        other = get_user_by_email(db, email)
        if other and other.id != user.id:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already in use")
    
    user.name = name or None
    user.email = email
    user.phone = phone or None
    db.commit()
    db.refresh(user)
    return user


def update_profile_photo(db: Session, user: User, profile_image: str) -> User:
    user.profile_image = profile_image
    db.commit()
    db.refresh(user)
    return user


def export_user_data(db: Session, user: User, current: datetime) -> Dict:
    """Account data export (password hash and stored documents excluded)."""
    generations = (
        db.query(ResumeGeneration)
        .filter(ResumeGeneration.user_id == user.id)
        .order_by(ResumeGeneration.created_at.desc())
        .all()
    )
    return {
        "exportDate": current.isoformat(),
        "user": {
            "id": user.id,
            "email": user.email,
            "name": user.name,
            "phone": user.phone,
            "profileImage": user.profile_image,
            "status": user.status.value,
            "plan": user.plan.value,
            "hasFullAccess": user.has_full_access,
            "creditsUsed": user.credits_used,
            "dailyResumeCount": user.daily_resume_count,
            "dailyResumeLimit": user.daily_resume_limit,
            "lastResumeDate": user.last_resume_date.isoformat() if user.last_resume_date else None,
            "createdAt": user.created_at.isoformat() if user.created_at else None,
        },
        "resumes": [
            {
                "id": g.id,
                "createdAt": g.created_at.isoformat() if g.created_at else None,
                "jobTitle": g.job_title,
                "companyName": g.company_name,
                "matchScore": g.match_score,
                "originalName": g.original_name,
                "status": g.status.value,
            }
            for g in generations
        ],
        "totalResumes": len(generations),
    }


def delete_account(db: Session, user: User):
    """Delete the account; generation records go with it through the ORM cascade."""
    user_id = user.id
    db.query(LoginHistory).filter(LoginHistory.user_id == user_id).delete(synchronize_session=False)
    db.delete(user)
    log_activity(db, user_id, "DELETE_ACCOUNT", "User deleted account")
    db.commit()
    logger.info(f"Account deleted: user_id={user_id}")
