# mock_licencias/portal_paciente/main.py

import logging
from datetime import datetime, timezone
from typing import Optional

import uvicorn
from fastapi import APIRouter, FastAPI, Request

from ..comun.cliente_licencias import ClienteLicencias
from ..comun.config import ConfigPortal
from ..comun.respuestas import registrar_manejadores

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("portal_paciente")

MENSAJES_FALLO = {"licencias_paciente": "Failed to retrieve patient licenses"}

router = APIRouter(prefix="/patient", tags=["🧑‍⚕️ Paciente"])


@router.get("/{patient_id}/licenses", summary="Licencias del paciente")
async def licencias_paciente(patient_id: str, request: Request):
    """
    Reenvía la consulta al servicio de Licencias y devuelve sus licencias
    junto con el total.
    """
    logger.info(f"[PORTAL] Consulta de licencias del paciente {patient_id}")
    licencias = await request.app.state.cliente.licencias_por_paciente(patient_id)
    return {
        "success": True,
        "data": licencias,
        "count": len(licencias),
        "message": f"Found {len(licencias)} license(s) for patient {patient_id}",
    }


def crear_app(config: Optional[ConfigPortal] = None, cliente: Optional[ClienteLicencias] = None) -> FastAPI:
    config = config or ConfigPortal()
    logger.setLevel(config.log_level)

    app = FastAPI(
        title="🧑‍⚕️ Portal del Paciente",
        description="Consulta las licencias médicas de un paciente en el servicio de Licencias.",
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
