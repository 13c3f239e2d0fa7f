"""
Grant a FREE or PRO plan to a user by email from the command line.
Run: python -m scripts.grant_plan user@example.com PRO
"""
import sys
import os
import argparse

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi import HTTPException
from jobfit.db.session import SessionLocal
from jobfit.services.admin_service import grant_plan_to_user
from jobfit.services.user_service import get_user_by_email
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def grant_plan_by_email(email: str, plan: str) -> bool:
    """Grant ``plan`` to the account behind ``email``; False when it cannot be done."""
    db = SessionLocal()
    try:
        user = get_user_by_email(db, email)
        if not user:
            logger.error(f"User {email} not found")
            return False
        
        logger.info(f"Found existing user: {email} (ID: {user.id})")
        user = grant_plan_to_user(db, user.id, plan)
        logger.info(f"User {email} is now on {user.plan.value} with full access")
        return True
    except HTTPException as e:
        logger.error(f"Grant refused: {e.detail}")
        return False
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Grant a FREE or PRO plan to a user")
    parser.add_argument("email")
    parser.add_argument("plan", choices=["FREE", "PRO", "free", "pro"])
    args = parser.parse_args()
    
    if grant_plan_by_email(args.email, args.plan):
        print(f"\n[SUCCESS] {args.email} granted {args.plan.upper()} plan")
    else:
        print(f"\n[ERROR] Failed to grant plan to {args.email}")
        sys.exit(1)
