# mock_licencias/validador_aseguradora/__init__.py

"""
Microservicio Validador de la Aseguradora.
Verifica folios de licencias médicas y consulta las licencias de un paciente
a través del servicio de Licencias.
"""

from .main import app, crear_app, licencias_paciente, verificar_licencia

__all__ = [
    "app",
    "crear_app",
    "licencias_paciente",
    "verificar_licencia",
]
