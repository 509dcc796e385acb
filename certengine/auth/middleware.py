"""Shared-secret guard for the scheduler-facing endpoints."""

import hmac
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader

from certengine.config import settings


CRON_SECRET_HEADER = APIKeyHeader(name="Authorization", auto_error=False)


def secrets_match(presented: str, expected: str) -> bool:
    """Constant-time comparison of the presented and configured secrets."""
    return hmac.compare_digest(presented.encode(), expected.encode())


async def verify_cron_secret(
    auth_header: str | None = Depends(CRON_SECRET_HEADER),
) -> None:
    """Require `Authorization: Bearer <cron_secret>`."""
    if not auth_header or not auth_header.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid Authorization header",
        )
    secret = auth_header[7:].strip()
    if not secret:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing cron secret",
        )
    if not secrets_match(secret, settings.cron_secret):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid cron secret",
        )


# Type alias for dependency injection
CronDep = Annotated[None, Depends(verify_cron_secret)]
