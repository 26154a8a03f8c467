from dataclasses import dataclass
from typing import Optional, Protocol

import jwt
from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from lms_media.auth.jwt import decode_token
from lms_media.core.logging_config import logger

security = HTTPBearer(auto_error=False)  # <- belangrijk: niet auto-error


@dataclass(frozen=True)
class Identity:
    user_id: Optional[str]
    role: Optional[str]
    permitted: bool


ANONYMOUS = Identity(user_id=None, role=None, permitted=False)


class IdentityGate(Protocol):
    def authorize(self, token: Optional[str]) -> Identity: ...


class JWTIdentityGate:
    """Yes/no verdict plus role claim from an HS256 bearer token."""

    def authorize(self, token: Optional[str]) -> Identity:
        if not token:
            return ANONYMOUS
        try:
            payload = decode_token(token)
        except jwt.PyJWTError as e:
            logger.info("auth_token_rejected", reason=type(e).__name__)
            return ANONYMOUS

        user_id = payload.get("sub") or payload.get("id")
        if not user_id:
            return ANONYMOUS
        return Identity(user_id=str(user_id), role=payload.get("role"), permitted=True)


_gate = JWTIdentityGate()


def get_identity_gate() -> IdentityGate:
    return _gate


def _extract_token(
    request: Request, creds: HTTPAuthorizationCredentials | None
) -> str | None:
    # 1) cookie
    cookie_token = request.cookies.get("access_token")
    if cookie_token:
        return cookie_token

    # 2) Authorization header
    if creds and creds.credentials:
        return creds.credentials

    return None


def require_identity(
    request: Request,
    creds: HTTPAuthorizationCredentials | None = Depends(security),
    gate: IdentityGate = Depends(get_identity_gate),
) -> Identity:
    identity = gate.authorize(_extract_token(request, creds))
    if not identity.permitted:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return identity
