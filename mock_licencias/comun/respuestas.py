# mock_licencias/comun/respuestas.py

"""
Traducción de errores a sobres JSON en la frontera HTTP.

Todas las respuestas de error tienen la forma
`{"success": false, "error": ..., "code"?: ..., "message"?: ...}`.
"""

import logging
from typing import Dict

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .errores import ErrorServicio, TipoError

MENSAJE_FALLO_POR_DEFECTO = "Failed to process request"


def _mensaje_fallo(request: Request, mensajes_fallo: Dict[str, str]) -> str:
    """Mensaje genérico del endpoint que atendía la petición."""
    endpoint = request.scope.get("endpoint")
    return mensajes_fallo.get(getattr(endpoint, "__name__", ""), MENSAJE_FALLO_POR_DEFECTO)


def respuesta_error(exc: ErrorServicio, mensaje_fallo: str = MENSAJE_FALLO_POR_DEFECTO) -> JSONResponse:
    match exc.tipo:
        case TipoError.NO_ENCONTRADO:
            cuerpo = {"success": False, "error": "License not found", "message": exc.mensaje}
        case TipoError.FOLIO_AGOTADO | TipoError.INTERNO:
            cuerpo = {"success": False, "error": "Internal server error", "message": mensaje_fallo}
        case (
            TipoError.CAMPO_INVALIDO
            | TipoError.UPSTREAM
            | TipoError.SERVICIO_NO_DISPONIBLE
            | TipoError.COMUNICACION
        ):
            cuerpo = {"success": False, "error": exc.mensaje}
            if exc.codigo:
                cuerpo["code"] = exc.codigo
    return JSONResponse(status_code=exc.status_code, content=cuerpo)


def registrar_manejadores(app: FastAPI, logger: logging.Logger, mensajes_fallo: Dict[str, str]) -> None:
    """Instala los manejadores de error comunes a los tres microservicios."""

    @app.exception_handler(ErrorServicio)
    async def manejar_error_servicio(request: Request, exc: ErrorServicio):
        if exc.tipo in (TipoError.INTERNO, TipoError.FOLIO_AGOTADO):
            logger.error(f"Error interno en {request.method} {request.url.path}: {exc!r}")
        return respuesta_error(exc, _mensaje_fallo(request, mensajes_fallo))

    @app.exception_handler(RequestValidationError)
    async def manejar_peticion_invalida(request: Request, exc: RequestValidationError):
        logger.info(f"Petición mal formada en {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=400,
            content={"success": False, "error": "Invalid request body", "code": "VALIDATION_ERROR"},
        )

    @app.exception_handler(StarletteHTTPException)
    async def manejar_http(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return JSONResponse(
                status_code=404,
                content={
                    "success": False,
                    "error": "Not Found",
                    "message": f"Route {request.method} {request.url.path} not found",
                },
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def manejar_inesperado(request: Request, exc: Exception):
        logger.error(f"Error no controlado en {request.method} {request.url.path}", exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "Internal server error",
                "message": _mensaje_fallo(request, mensajes_fallo),
            },
        )
