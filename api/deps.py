from typing import Dict, Optional

from fastapi import Depends, Header

from domain.errors import ForbiddenError, Unauthorized
from infra.repositories.profiles_repository import ProfilesRepository

profiles_repo = ProfilesRepository()


def get_current_user(authorization: Optional[str] = Header(default=None)) -> Dict:
    if not authorization:
        raise Unauthorized("No authorization header")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise Unauthorized("Unauthorized")
    user = profiles_repo.get_by_token(token.strip())
    if not user:
        raise Unauthorized("Unauthorized")
    return user


def require_company(user: Dict = Depends(get_current_user)) -> Dict:
    if user.get("user_type") != "company":
        raise ForbiddenError("Only company accounts can perform this action")
    return user
