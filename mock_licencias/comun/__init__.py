# mock_licencias/comun/__init__.py

"""
Piezas compartidas por los tres microservicios: configuración, errores,
sobres de respuesta y el cliente HTTP del servicio de Licencias.
"""

from .cliente_licencias import ClienteLicencias
from .config import ConfigLicencias, ConfigPortal, ConfigValidador
from .errores import ErrorServicio, TipoError
from .respuestas import registrar_manejadores, respuesta_error

__all__ = [
    "ClienteLicencias",
    "ConfigLicencias",
    "ConfigPortal",
    "ConfigValidador",
    "ErrorServicio",
    "TipoError",
    "registrar_manejadores",
    "respuesta_error",
]
