from fastapi import Security
from fastapi.concurrency import run_in_threadpool
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import httpx
from pydantic import ValidationError as PayloadError
from app.config import settings
from app.exceptions import ServiceUnavailable, TokenExpired, Unauthenticated, Unauthorized
from app.schemas.auth import Actor
from structlog import get_logger
from pybreaker import CircuitBreaker, CircuitBreakerError

logger = get_logger()
security = HTTPBearer(auto_error=False)
# Auth rejections are not counted as failures.
breaker = CircuitBreaker(
    fail_max=settings.AUTH_BREAKER_FAIL_MAX,
    reset_timeout=settings.AUTH_BREAKER_RESET_TIMEOUT,
    exclude=[Unauthenticated, Unauthorized],
)


def _error_code(response: httpx.Response) -> str | None:
    try:
        return response.json().get("code")
    except (ValueError, AttributeError):
        return None


@breaker
def verify_token(token: str) -> dict:
    """Ask the user-management service who owns ``token``."""
    with httpx.Client(timeout=settings.AUTH_TIMEOUT_SECONDS) as client:
        response = client.get(
            f"{settings.USER_MANAGEMENT_URL}/auth/verify",
            headers={"Authorization": f"Bearer {token}"}
        )
    if response.status_code == 401:
        if _error_code(response) == "TOKEN_EXPIRED":
            raise TokenExpired("Token expired. Please log in again.")
        raise Unauthenticated("Token is invalid")
    if response.status_code == 403:
        raise Unauthorized("Account banned. Please contact support.")
    if response.status_code != 200:
        logger.error("Token verification failed", status_code=response.status_code)
        raise ServiceUnavailable("Authentication service unavailable")
    return response.json()


async def get_current_user(credentials: HTTPAuthorizationCredentials | None = Security(security)) -> Actor:
    if credentials is None:
        raise Unauthenticated("Not authorized, no token")
    try:
        payload = await run_in_threadpool(verify_token, credentials.credentials)
    except CircuitBreakerError:
        logger.error("Authentication circuit open")
        raise ServiceUnavailable("Authentication service unavailable")
    except httpx.HTTPError as e:
        logger.error("Token verification request failed", error=str(e))
        raise ServiceUnavailable("Authentication service unavailable")
    try:
        return Actor.model_validate(payload)
    except PayloadError:
        logger.error("Token verification returned an unusable identity")
        raise Unauthenticated("Token is invalid")
