"""
API dependencies - shared across all routes.
"""
import uuid

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from pydantic import BaseModel

from leadfunnel.config import settings
from leadfunnel.core.exceptions import UnauthorizedError
from leadfunnel.core.security import verify_token


# Tokens are issued by the external auth layer; tokenUrl only feeds the docs UI
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_PREFIX}/auth/login")


class CurrentUser(BaseModel):
    """Operator identity carried by the access token."""
    user_id: str
    company_id: uuid.UUID


async def get_current_user(token: str = Depends(oauth2_scheme)) -> CurrentUser:
    """Get current authenticated operator from JWT token."""
    payload = verify_token(token, "access")
    if not payload:
        raise UnauthorizedError()

    user_id = payload.get("user_id")
    company_id = payload.get("company_id")
    if not user_id or not company_id:
        raise UnauthorizedError()

    try:
        company_id = uuid.UUID(str(company_id))
    except ValueError:
        raise UnauthorizedError()

    return CurrentUser(user_id=str(user_id), company_id=company_id)
