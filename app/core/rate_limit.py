"""
Rate limiting para a API
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings

limiter = Limiter(key_func=get_remote_address)


def limit(limit_value: str):
    """Wrapper para limiter.limit que verifica se rate limiting está habilitado"""
    if not settings.RATE_LIMIT_ENABLED:
        # rate limiting desabilitado: endpoint fica como está
        def noop_decorator(func):
            return func
        return noop_decorator
    return limiter.limit(limit_value)
