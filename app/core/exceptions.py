"""
Erros de domínio da API

Os services levantam estas exceções; o handler registrado em app.main
converte cada uma na resposta HTTP correspondente.
"""
from typing import Optional


class CarMarketError(Exception):
    status_code = 400
    default_detail = "Bad request"

    def __init__(self, detail: Optional[str] = None, reason: Optional[str] = None):
        self.detail = detail or self.default_detail
        self.reason = reason
        super().__init__(self.detail)


class ValidationError(CarMarketError):
    """Dados enviados pelo cliente inválidos; `reason` indica a checagem que falhou"""
    status_code = 400
    default_detail = "Invalid data"


class Unauthenticated(CarMarketError):
    status_code = 401
    default_detail = "Could not validate credentials"


class Forbidden(CarMarketError):
    status_code = 403
    default_detail = "Operation not allowed"


class NotFound(CarMarketError):
    status_code = 404
    default_detail = "Not found"


class Conflict(CarMarketError):
    status_code = 409
    default_detail = "Already exists"
