# mock_licencias/micro_licencias/__init__.py

"""
Microservicio de Licencias.
Emite licencias médicas con folio único, las consulta por folio o por
paciente y verifica su validez.
"""

from .almacen import AlmacenLicencias, AlmacenMemoria, FolioDuplicadoError
from .main import app, crear_app
from .modelos import EstadoLicencia, Licencia, Verificacion
from .servicio import MAX_DIAS, MAX_INTENTOS_FOLIO, ServicioLicencias, generar_folio

__all__ = [
    "AlmacenLicencias",
    "AlmacenMemoria",
    "FolioDuplicadoError",
    "app",
    "crear_app",
    "EstadoLicencia",
    "Licencia",
    "Verificacion",
    "MAX_DIAS",
    "MAX_INTENTOS_FOLIO",
    "ServicioLicencias",
    "generar_folio",
]
