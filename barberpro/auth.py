import logging

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError
from jose import jwt as jose_jwt
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from .config import SUPABASE_JWT_ALGORITHM, SUPABASE_JWT_AUDIENCE, SUPABASE_JWT_SECRET
from .database import get_db
from .models import Profile, UserRole
from .security_middleware import set_rls_context
from .shared.validators import validate_uuid

logger = logging.getLogger(__name__)

security = HTTPBearer()


def verify_access_token(token: str) -> dict:
    """
    Verify an access token issued by the hosted auth service.

    Checks the HS256 signature, the audience and the expiry.
    """
    try:
        decoded = jose_jwt.decode(
            token,
            SUPABASE_JWT_SECRET,
            algorithms=[SUPABASE_JWT_ALGORITHM],
            audience=SUPABASE_JWT_AUDIENCE,
        )
    except ExpiredSignatureError as e:
        logger.info("ℹ️ Expired access token rejected")
        raise HTTPException(
            status_code=401,
            detail="Token has expired. Please refresh your session.",
            headers={"X-Token-Expired": "true"},
        ) from e
    except JWTError as e:
        logger.warning(f"⚠️ Token verification failed: {e}")
        raise HTTPException(status_code=401, detail="Token verification failed") from e

    if not validate_uuid(decoded.get("sub")):
        logger.error(f"❌ Token missing user ID claim. Available claims: {list(decoded.keys())}")
        raise HTTPException(status_code=401, detail="Invalid token claims")

    return decoded


async def get_current_profile(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> Profile:
    """Get (or create on first sight) the profile behind the bearer token"""
    token = credentials.credentials

    if len(token.split(".")) != 3:
        logger.warning(f"⚠️ Malformed token received, token length: {len(token)}")
        raise HTTPException(
            status_code=401, detail="Invalid token format. Expected a valid JWT token."
        )

    decoded = verify_access_token(token)
    user_id = decoded["sub"]
    email = decoded.get("email")

    profile = (
        db.query(Profile).filter(Profile.id == user_id).options(joinedload(Profile.roles)).first()
    )

    if not profile:
        logger.info(f"🆕 Creating profile for {email or user_id}")
        metadata = decoded.get("user_metadata") or {}
        profile = Profile(id=user_id, email=email, full_name=metadata.get("full_name"))
        profile.roles.append(UserRole(role="admin"))
        db.add(profile)
        try:
            db.commit()
            db.refresh(profile)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"❌ Failed to create profile for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to load user profile") from e

    # Row-level security context for this database session
    set_rls_context(db, profile.id)

    return profile


async def require_admin(profile: Profile = Depends(get_current_profile)) -> Profile:
    """Only shop admins may change the catalog, stock and settings"""
    if profile.role != "admin":
        logger.warning(f"⚠️ Profile {profile.id} attempted an admin-only action")
        raise HTTPException(status_code=403, detail="Admin role required")
    return profile
