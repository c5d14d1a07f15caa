# mock_licencias/__init__.py

"""
Paquete raíz del simulador de licencias médicas.
Aquí se agrupan los distintos microservicios:
- micro_licencias
- portal_paciente
- validador_aseguradora
"""

__all__ = [
    "comun",
    "micro_licencias",
    "portal_paciente",
    "validador_aseguradora",
]
