# errors.py ──────────────────────────────────────────────────
import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from Conta.database import StoreUnavailable

logger = logging.getLogger(__name__)

GENERIC_UNAVAILABLE = "Serviço temporariamente indisponível"


class InvalidArgument(HTTPException):
    def __init__(self, detail: str = "Dados inválidos"):
        super().__init__(status.HTTP_400_BAD_REQUEST, detail=detail)


class Unauthenticated(HTTPException):
    def __init__(self, detail: str = "Faça login para continuar"):
        super().__init__(status.HTTP_401_UNAUTHORIZED, detail=detail)


class Forbidden(HTTPException):
    def __init__(self, detail: str = "Acesso negado"):
        super().__init__(status.HTTP_403_FORBIDDEN, detail=detail)


class NotFound(HTTPException):
    def __init__(self, detail: str = "Registro não encontrado"):
        super().__init__(status.HTTP_404_NOT_FOUND, detail=detail)


class Unavailable(HTTPException):
    def __init__(self, detail: str = GENERIC_UNAVAILABLE):
        super().__init__(status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail)


def _field_message(err: dict) -> str:
    # pydantic prefixes ValueError messages with "Value error, "
    ctx_error = (err.get("ctx") or {}).get("error")
    if ctx_error is not None:
        return str(ctx_error)
    return err.get("msg", "Valor inválido")


def _field_name(err: dict) -> str:
    loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
    return ".".join(loc)


async def _store_unavailable(request: Request, exc: StoreUnavailable):
    logger.error(
        "Store unavailable during %s %s: %s",
        request.method, request.url.path, exc,
        exc_info=exc,
    )
    err = Unavailable()
    return JSONResponse({"detail": err.detail}, status_code=err.status_code)


async def _invalid_request(request: Request, exc: RequestValidationError):
    errors = [
        {"field": _field_name(e), "message": _field_message(e)}
        for e in exc.errors()
    ]
    detail = errors[0]["message"] if errors else "Dados inválidos"
    return JSONResponse(
        {"detail": detail, "errors": errors},
        status_code=status.HTTP_400_BAD_REQUEST,
    )


def register_handlers(app: FastAPI) -> None:
    """Translate store and validation failures at the API boundary."""
    app.add_exception_handler(StoreUnavailable, _store_unavailable)
    app.add_exception_handler(RequestValidationError, _invalid_request)
