# mock_licencias/validador_aseguradora/main.py

import logging
from datetime import datetime, timezone
from typing import Optional

import uvicorn
from fastapi import APIRouter, FastAPI, Request

from ..comun.cliente_licencias import ClienteLicencias
from ..comun.config import ConfigValidador
from ..comun.respuestas import registrar_manejadores

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("validador_aseguradora")

MENSAJES_FALLO = {
    "verificar_licencia": "Failed to verify license",
    "licencias_paciente": "Failed to retrieve patient licenses",
}

router = APIRouter(prefix="/insurer", tags=["🏥 Aseguradora"])


@router.get("/licenses/{folio}/verify", summary="Verificar una licencia")
async def verificar_licencia(folio: str, request: Request):
    """
    Indica si el folio corresponde a una licencia vigente.

    Un folio que el servicio de Licencias no conoce se responde como
    `valid: false`, igual que uno no vigente.
    """
    logger.info(f"[VALIDADOR] Verificación del folio {folio}")
    verificacion = await request.app.state.cliente.verificar_licencia(folio)
    valida = bool(verificacion.get("valid"))
    return {
        "success": True,
        "data": {"valid": valida},
        "message": f"License {folio} is valid" if valida else f"License {folio} is invalid or not found",
    }


@router.get("/patients/{patient_id}/licenses", summary="Licencias de un paciente")
async def licencias_paciente(patient_id: str, request: Request):
    logger.info(f"[VALIDADOR] Consulta de licencias del paciente {patient_id}")
    licencias = await request.app.state.cliente.licencias_por_paciente(patient_id)
    return {
        "success": True,
        "data": licencias,
        "count": len(licencias),
        "message": f"Found {len(licencias)} license(s) for patient {patient_id}",
    }


def crear_app(config: Optional[ConfigValidador] = None, cliente: Optional[ClienteLicencias] = None) -> FastAPI:
    config = config or ConfigValidador()
    logger.setLevel(config.log_level)

    app = FastAPI(
        title="🏥 Validador de la Aseguradora",
        description="Permite a la aseguradora verificar folios y consultar las licencias de un paciente.",
        version="1.0.0",
    )
    app.state.config = config
    app.state.cliente = cliente or ClienteLicencias(config.licenses_service_url, config.request_timeout)

    @app.get("/health", tags=["🩺 Salud"], summary="Estado del servicio")
    async def salud():
        return {
            "status": "OK",
            "service": config.nombre_servicio,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    app.include_router(router)
    registrar_manejadores(app, logger, MENSAJES_FALLO)
    return app


app = crear_app()


def ejecutar() -> None:
    config = app.state.config
    uvicorn.run(app, host="0.0.0.0", port=config.port, log_level=config.log_level.lower())


if __name__ == "__main__":
    ejecutar()
