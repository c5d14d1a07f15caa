# mock_licencias/portal_paciente/__init__.py

"""
Microservicio Portal del Paciente.
Muestra al paciente sus licencias médicas consultando el servicio de Licencias.
"""

from .main import app, crear_app, licencias_paciente

__all__ = [
    "app",
    "crear_app",
    "licencias_paciente",
]
