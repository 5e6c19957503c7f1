"""Bearer-token authentication for the dashboard owner."""

from fastapi import status
from jose import JWTError, jwt

from src.api.core.constants import JWT_ALGORITHM, JWT_AUDIENCE
from src.api.core.exceptions.base import KeyHubException
from src.api.core.messages import MessageCode
from src.core.context import DashboardOwnerContext
from src.utils.logger import get_logger
from src.utils.settings.auth import AuthSettings

logger = get_logger(__name__)


def extract_bearer_token(authorization: str | None) -> str:
    if not authorization:
        raise KeyHubException(
            MessageCode.AUTH_REQUIRED,
            status.HTTP_401_UNAUTHORIZED,
            {"description": "Provide an 'Authorization: Bearer <token>' header"},
        )

    auth_parts = authorization.split(" ")
    if len(auth_parts) != 2 or auth_parts[0].lower() != "bearer" or not auth_parts[1]:
        raise KeyHubException(
            MessageCode.INVALID_TOKEN,
            status.HTTP_401_UNAUTHORIZED,
            {"description": "Authorization header must be 'Bearer <token>'"},
        )
    return auth_parts[1]


def handle_jwt_auth(token: str) -> DashboardOwnerContext:
    secret = AuthSettings().SUPABASE_JWT_SECRET
    if not secret:
        logger.error("SUPABASE_JWT_SECRET is not configured")
        raise KeyHubException(
            MessageCode.INVALID_TOKEN,
            status.HTTP_401_UNAUTHORIZED,
            {"description": "Token verification is not configured"},
        )

    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[JWT_ALGORITHM],
            audience=JWT_AUDIENCE,
        )
    except JWTError as e:
        logger.warning(f"JWT decoding failed: {e}")
        raise KeyHubException(
            MessageCode.INVALID_TOKEN,
            status.HTTP_401_UNAUTHORIZED,
            {"description": "Invalid or expired authentication token"},
        )

    if not payload.get("sub"):
        raise KeyHubException(
            MessageCode.INVALID_TOKEN,
            status.HTTP_401_UNAUTHORIZED,
            {"description": "Token has no subject"},
        )

    if payload.get("role") == "anon":
        raise KeyHubException(
            MessageCode.INSUFFICIENT_PERMISSIONS,
            status.HTTP_403_FORBIDDEN,
            {"description": "Anonymous access not permitted"},
        )

    return DashboardOwnerContext(
        user_id=payload.get("sub", ""),
        email=payload.get("email", ""),
        role=payload.get("role", "authenticated"),
        claims=payload,
    )
