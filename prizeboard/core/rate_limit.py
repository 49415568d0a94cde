"""
Login rate limiting

slowapi binds route decorators to one Limiter at import time, so the Limiter
is shared. Everything configurable is read per request from the owning app's
settings: the limit travels inside the rate-limit key, and counters are
scoped to the app instance.
"""
from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)


def login_key(request: Request) -> str:
    settings = request.app.state.settings
    return f"{settings.LOGIN_RATE_LIMIT}|{request.app.state.instance_id}|{get_remote_address(request)}"


def login_rate_limit(key: str) -> str:
    return key.split("|", 1)[0]


def rate_limit_disabled(request: Request) -> bool:
    return not request.app.state.settings.RATE_LIMIT_ENABLED
