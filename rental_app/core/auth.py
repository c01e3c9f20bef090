import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable

import jwt
from fastapi import HTTPException, Request, status

from models.enums import UserRole

from .settings import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthContext:
    user_id: str
    role: UserRole

    @property
    def is_manager(self) -> bool:
        return self.role == UserRole.MANAGER

    @property
    def is_tenant(self) -> bool:
        return self.role == UserRole.TENANT


@lru_cache(maxsize=1)
def _jwks_client(url: str) -> jwt.PyJWKClient:
    return jwt.PyJWKClient(url, cache_keys=True)


def _signing_key(token: str):
    if settings.JWKS_URL:
        return _jwks_client(settings.JWKS_URL).get_signing_key_from_jwt(token).key
    if not settings.JWT_SECRET_KEY:
        raise RuntimeError("JWT_SECRET_KEY or JWKS_URL must be configured")
    return settings.JWT_SECRET_KEY


def decode_access_token(token: str) -> dict:
    algorithms = ["RS256"] if settings.JWKS_URL else [settings.ALGORITHM]
    options = {"require": ["sub"], "verify_aud": bool(settings.JWT_AUDIENCE)}
    return jwt.decode(
        token,
        _signing_key(token),
        algorithms=algorithms,
        audience=settings.JWT_AUDIENCE,
        options=options,
    )


def extract_bearer_token(request: Request) -> str:
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized: no token",
        )

    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized: malformed header",
        )
    return token.strip()


def resolve_identity(token: str) -> tuple[str, str]:
    try:
        payload = decode_access_token(token)
    except jwt.MissingRequiredClaimError:
        raise HTTPException(status_code=400, detail="Invalid token")
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.PyJWTError as e:
        logger.warning("Rejected bearer token: %s", e)
        raise HTTPException(status_code=401, detail="Invalid token")

    user_id = payload.get("sub")
    if not user_id or not isinstance(user_id, str):
        raise HTTPException(status_code=400, detail="Invalid token")

    role = str(payload.get(settings.ROLE_CLAIM) or "").lower()
    return user_id, role


def require_roles(*allowed: UserRole | str):
    allowed_roles = {UserRole(str(getattr(r, "value", r)).lower()) for r in allowed}

    async def dependency(request: Request) -> AuthContext:
        token = extract_bearer_token(request)
        user_id, role = resolve_identity(token)

        if role not in {r.value for r in allowed_roles}:
            logger.warning(
                "Access denied for role=%r on %s, allowed=%s",
                role,
                request.url.path,
                sorted(r.value for r in allowed_roles),
            )
            raise HTTPException(status_code=403, detail="Access Denied")

        return AuthContext(user_id=user_id, role=UserRole(role))

    return dependency


def ensure_self_or_roles(
    auth: AuthContext, cognito_id: str, roles: Iterable[UserRole] = (UserRole.MANAGER,)
) -> None:
    if auth.user_id == cognito_id or auth.role in set(roles):
        return
    raise HTTPException(status_code=403, detail="Access Denied")


manager_only = require_roles(UserRole.MANAGER)
tenant_only = require_roles(UserRole.TENANT)
any_member = require_roles(UserRole.MANAGER, UserRole.TENANT)
