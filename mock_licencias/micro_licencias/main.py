# mock_licencias/micro_licencias/main.py

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

import uvicorn
from fastapi import APIRouter, Body, Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse

from ..comun.config import ConfigLicencias
from ..comun.errores import ErrorServicio
from ..comun.respuestas import registrar_manejadores
from .almacen import AlmacenLicencias, AlmacenMemoria
from .almacen_sql import AlmacenSQL
from .estados_pact import aplicar_estado
from .servicio import ServicioLicencias, generar_folio

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("micro_licencias")

MENSAJES_FALLO = {
    "crear_licencia": "Failed to create license",
    "listar_licencias_paciente": "Failed to retrieve patient licenses",
    "obtener_licencia": "Failed to retrieve license",
    "verificar_licencia": "Failed to verify license",
    "configurar_estado_pact": "Failed to set up Pact state",
}

EJEMPLO_ALTA = {
    "patientId": "11111111-1",
    "doctorId": "DOC123",
    "diagnosis": "Gripe común",
    "startDate": "2025-09-26",
    "days": 7,
}

router = APIRouter(prefix="/licenses", tags=["📋 Licencias"])
router_salud = APIRouter(tags=["🩺 Salud"])
router_pact = APIRouter(prefix="/_pactState", tags=["🔧 Pact"])


def obtener_servicio(request: Request) -> ServicioLicencias:
    return request.app.state.servicio


@router.post("", status_code=201, summary="Emitir una licencia médica")
async def crear_licencia(
    datos: Optional[Dict[str, Any]] = Body(default=None, examples=[EJEMPLO_ALTA]),
    servicio: ServicioLicencias = Depends(obtener_servicio),
):
    """
    Valida los datos, genera un folio único y guarda la licencia en estado `issued`.

    Los errores de validación devuelven 400 con un `code` estable
    (INVALID_PATIENT_ID, INVALID_DOCTOR_ID, INVALID_DIAGNOSIS,
    INVALID_START_DATE, INVALID_DAYS).
    """
    datos = datos or {}
    licencia = await servicio.crear_licencia(
        patient_id=datos.get("patientId"),
        doctor_id=datos.get("doctorId"),
        diagnosis=datos.get("diagnosis"),
        start_date=datos.get("startDate"),
        days=datos.get("days"),
    )
    return {
        "success": True,
        "data": licencia.vista(incluir_creacion=False),
        "message": "License created successfully",
    }


@router.get("", summary="Listar licencias de un paciente")
async def listar_licencias_paciente(
    patient_id: Optional[str] = Query(default=None, alias="patientId"),
    servicio: ServicioLicencias = Depends(obtener_servicio),
):
    """Licencias del paciente, de la más reciente a la más antigua."""
    if not patient_id:
        raise ErrorServicio.campo_invalido(
            "patientId query parameter is required and must be a string", "MISSING_PATIENT_ID"
        )
    licencias = await servicio.obtener_por_paciente(patient_id)
    return {
        "success": True,
        "data": [licencia.vista() for licencia in licencias],
        "count": len(licencias),
    }


@router.get("/{folio}", summary="Obtener una licencia por folio")
async def obtener_licencia(folio: str, servicio: ServicioLicencias = Depends(obtener_servicio)):
    licencia = await servicio.obtener_por_folio(folio)
    return {"success": True, "data": licencia.vista()}


@router.get("/{folio}/verify", summary="Verificar la validez de una licencia")
async def verificar_licencia(folio: str, servicio: ServicioLicencias = Depends(obtener_servicio)):
    """
    `valid` es true solo para licencias en estado `issued`.

    Un folio inexistente responde 404 con `success: true`: la verificación se
    hizo, lo que no existe es la licencia.
    """
    verificacion = await servicio.verificar_licencia(folio)
    return JSONResponse(
        status_code=200 if verificacion.encontrada else 404,
        content={
            "success": True,
            "data": verificacion.model_dump(),
            "message": "License is valid" if verificacion.valid else "License is invalid or not found",
        },
    )


@router_salud.get("/health", summary="Estado del servicio y del almacén")
async def salud(request: Request):
    conectado = await request.app.state.almacen.ping()
    return {
        "status": "OK",
        "service": request.app.state.config.nombre_servicio,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": "connected" if conectado else "disconnected",
    }


@router_pact.post("", summary="Configurar el estado del proveedor para Pact")
async def configurar_estado_pact(request: Request, datos: Optional[Dict[str, Any]] = Body(default=None)):
    estado = (datos or {}).get("state")
    if not estado or not isinstance(estado, str):
        raise ErrorServicio.campo_invalido("State parameter is required and must be a string", "MISSING_STATE")

    logger.info(f"[PACT] Configurando estado: {estado!r}")
    await aplicar_estado(request.app.state.almacen, estado)
    return {"success": True, "message": f'State "{estado}" configured successfully'}


def crear_almacen(config: ConfigLicencias) -> AlmacenLicencias:
    if config.database_url:
        return AlmacenSQL(config.database_url)
    return AlmacenMemoria()


@asynccontextmanager
async def lifespan(app: FastAPI):
    await app.state.almacen.inicializar()
    logger.info(f"[LICENCIAS] {app.state.config.nombre_servicio} listo en el puerto {app.state.config.port}")
    yield
    await app.state.almacen.cerrar()


def crear_app(
    config: Optional[ConfigLicencias] = None,
    almacen: Optional[AlmacenLicencias] = None,
    generador_folio: Callable[[], str] = generar_folio,
) -> FastAPI:
    config = config or ConfigLicencias()
    logger.setLevel(config.log_level)

    app = FastAPI(
        title="📋 Servicio de Licencias",
        description="Emite, consulta y verifica licencias médicas.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.almacen = almacen or crear_almacen(config)
    app.state.servicio = ServicioLicencias(app.state.almacen, generador_folio)

    app.include_router(router)
    app.include_router(router_salud)
    if config.pact_states_enabled:
        app.include_router(router_pact)
        logger.info("[LICENCIAS] Endpoint de estados Pact disponible en /_pactState")

    registrar_manejadores(app, logger, MENSAJES_FALLO)
    return app


app = crear_app()


def ejecutar() -> None:
    config = app.state.config
    uvicorn.run(app, host="0.0.0.0", port=config.port, log_level=config.log_level.lower())


if __name__ == "__main__":
    ejecutar()
