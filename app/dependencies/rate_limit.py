from fastapi import Request, Response
from fastapi_limiter import FastAPILimiter
from fastapi_limiter.depends import RateLimiter

from app.config import settings

submit_rate_limiter = RateLimiter(
    times=settings.SUBMIT_RATE_LIMIT_TIMES,
    seconds=settings.SUBMIT_RATE_LIMIT_SECONDS,
)


async def limit_submissions(request: Request, response: Response):
    # Running without rate limiter when Redis was unavailable at startup
    if FastAPILimiter.redis is None:
        return
    await submit_rate_limiter(request, response)
