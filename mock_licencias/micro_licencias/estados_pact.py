# mock_licencias/micro_licencias/estados_pact.py

"""
Estados del proveedor para los tests de contrato (Pact) de los consumidores.
"""

import logging
from datetime import date, datetime, timezone

from .almacen import AlmacenLicencias
from .modelos import EstadoLicencia, Licencia

logger = logging.getLogger("micro_licencias")

FOLIO_PRUEBA = "L-1001"
PACIENTE_CON_LICENCIA = "11111111-1"
PACIENTE_SIN_LICENCIAS = "22222222-2"
FOLIOS_INEXISTENTES = ("L-404", "NOEXIST")


async def _paciente_con_licencia(almacen: AlmacenLicencias) -> None:
    if await almacen.buscar_por_folio(FOLIO_PRUEBA) is not None:
        logger.info(f"[PACT] La licencia {FOLIO_PRUEBA} ya existe")
        return
    await almacen.guardar(
        Licencia(
            folio=FOLIO_PRUEBA,
            patient_id=PACIENTE_CON_LICENCIA,
            doctor_id="DOC123",
            diagnosis="Gripe común",
            start_date=date(2025, 9, 26),
            days=7,
            status=EstadoLicencia.ISSUED,
            created_at=datetime.now(timezone.utc),
        )
    )
    logger.info(f"[PACT] Creada la licencia {FOLIO_PRUEBA} para el paciente {PACIENTE_CON_LICENCIA}")


async def _sin_licencias(almacen: AlmacenLicencias) -> None:
    borradas = await almacen.eliminar_por_paciente(PACIENTE_SIN_LICENCIAS)
    logger.info(f"[PACT] Eliminadas {borradas} licencia(s) del paciente {PACIENTE_SIN_LICENCIAS}")


async def _licencia_inexistente(almacen: AlmacenLicencias) -> None:
    for folio in FOLIOS_INEXISTENTES:
        borradas = await almacen.eliminar_por_folio(folio)
        logger.info(f"[PACT] Eliminadas {borradas} licencia(s) con folio {folio}")


async def _sin_preparacion(almacen: AlmacenLicencias) -> None:
    # Las validaciones de alta están siempre activas
    logger.info("[PACT] Estado sin preparación previa")


ESTADOS = {
    f"patient {PACIENTE_CON_LICENCIA} has issued license folio {FOLIO_PRUEBA}": _paciente_con_licencia,
    f"no licenses for patient {PACIENTE_SIN_LICENCIAS}": _sin_licencias,
    "license L-404 does not exist": _licencia_inexistente,
    "issued license days>0 is creatable": _sin_preparacion,
    "license creation validation is enabled": _sin_preparacion,
}


async def aplicar_estado(almacen: AlmacenLicencias, estado: str) -> bool:
    """Prepara el almacén para `estado`. Devuelve False si el estado no se conoce."""
    preparar = ESTADOS.get(estado)
    if preparar is None:
        logger.warning(f"[PACT] Estado desconocido: {estado!r}")
        return False
    await preparar(almacen)
    return True
