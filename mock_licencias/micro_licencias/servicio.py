# mock_licencias/micro_licencias/servicio.py

"""
Lógica del servicio de Licencias: emisión, consulta y verificación.
"""

import logging
import secrets
import string
import time
from datetime import date, datetime, timezone
from typing import Any, Callable, List

from ..comun.errores import ErrorServicio
from .almacen import AlmacenLicencias, FolioDuplicadoError
from .modelos import EstadoLicencia, Licencia, Verificacion

logger = logging.getLogger("micro_licencias")

MAX_INTENTOS_FOLIO = 5
# Cabe en un INTEGER de 32 bits en cualquier almacén SQL
MAX_DIAS = 2**31 - 1
LARGO_SUFIJO_FOLIO = 6
ALFABETO_SUFIJO = string.ascii_uppercase + string.digits


def generar_folio() -> str:
    """Folio con la forma LIC-<milisegundos>-<6 caracteres [A-Z0-9]>."""
    marca = int(time.time() * 1000)
    sufijo = "".join(secrets.choice(ALFABETO_SUFIJO) for _ in range(LARGO_SUFIJO_FOLIO))
    return f"LIC-{marca}-{sufijo}"


def _texto_requerido(valor: Any, nombre: str, codigo: str) -> str:
    if not isinstance(valor, str) or not valor.strip():
        raise ErrorServicio.campo_invalido(f"{nombre} is required and must be a non-empty string", codigo)
    return valor.strip()


def _es_entero(valor: Any) -> bool:
    # bool es subclase de int; un 7.0 llegado por JSON cuenta como entero
    if isinstance(valor, bool):
        return False
    if isinstance(valor, int):
        return True
    return isinstance(valor, float) and valor.is_integer()


def _parsear_fecha(valor: Any) -> date:
    if isinstance(valor, datetime):
        return valor.date()
    if isinstance(valor, date):
        return valor
    if isinstance(valor, str):
        texto = valor.strip()
        try:
            return date.fromisoformat(texto)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(texto).date()
        except ValueError:
            pass
    raise ErrorServicio.campo_invalido("startDate must be a valid date", "INVALID_START_DATE")


class ServicioLicencias:
    def __init__(
        self,
        almacen: AlmacenLicencias,
        generador_folio: Callable[[], str] = generar_folio,
    ):
        self.almacen = almacen
        self.generador_folio = generador_folio

    async def _folio_unico(self) -> str:
        # Best effort: dos altas concurrentes pueden elegir el mismo folio y
        # solo el índice único del almacén lo detecta.
        for intento in range(1, MAX_INTENTOS_FOLIO + 1):
            folio = self.generador_folio()
            if await self.almacen.buscar_por_folio(folio) is None:
                return folio
            logger.warning(f"[LICENCIAS] Folio {folio} ya existe (intento {intento}/{MAX_INTENTOS_FOLIO})")
        raise ErrorServicio.folio_agotado(MAX_INTENTOS_FOLIO)

    async def crear_licencia(
        self,
        patient_id: Any,
        doctor_id: Any,
        diagnosis: Any,
        start_date: Any,
        days: Any,
    ) -> Licencia:
        """
        Valida los datos, genera un folio único y guarda la licencia como
        `issued`. El orden de las validaciones es fijo: se informa del primer
        campo que falla.

        Raises:
            ErrorServicio: CAMPO_INVALIDO, FOLIO_AGOTADO o INTERNO.
        """
        patient_id = _texto_requerido(patient_id, "patientId", "INVALID_PATIENT_ID")
        doctor_id = _texto_requerido(doctor_id, "doctorId", "INVALID_DOCTOR_ID")
        diagnosis = _texto_requerido(diagnosis, "diagnosis", "INVALID_DIAGNOSIS")

        if not start_date:
            raise ErrorServicio.campo_invalido("startDate is required", "INVALID_START_DATE")
        if days is None:
            raise ErrorServicio.campo_invalido("days is required", "INVALID_DAYS")
        if not _es_entero(days) or days <= 0:
            raise ErrorServicio.campo_invalido("Days must be a positive integer greater than 0", "INVALID_DAYS")
        if days > MAX_DIAS:
            raise ErrorServicio.campo_invalido(f"Days must not exceed {MAX_DIAS}", "INVALID_DAYS")
        fecha_inicio = _parsear_fecha(start_date)

        folio = await self._folio_unico()
        licencia = Licencia(
            folio=folio,
            patient_id=patient_id,
            doctor_id=doctor_id,
            diagnosis=diagnosis,
            start_date=fecha_inicio,
            days=int(days),
            status=EstadoLicencia.ISSUED,
            created_at=datetime.now(timezone.utc),
        )

        try:
            guardada = await self.almacen.guardar(licencia)
        except FolioDuplicadoError as e:
            # Un choque detectado al escribir no vuelve al bucle de reintentos
            raise ErrorServicio.interno("Duplicate folio generated, please retry") from e

        logger.info(f"[LICENCIAS] Licencia {guardada.folio} emitida para el paciente {guardada.patient_id}")
        return guardada

    async def obtener_por_folio(self, folio: Any) -> Licencia:
        folio = _texto_requerido(folio, "Folio", "INVALID_FOLIO")
        licencia = await self.almacen.buscar_por_folio(folio)
        if licencia is None:
            raise ErrorServicio.no_encontrado("No license found with the provided folio")
        return licencia

    async def obtener_por_paciente(self, patient_id: Any) -> List[Licencia]:
        patient_id = _texto_requerido(patient_id, "patientId", "INVALID_PATIENT_ID")
        return await self.almacen.buscar_por_paciente(patient_id)

    async def verificar_licencia(self, folio: Any) -> Verificacion:
        """Solo una licencia en estado `issued` es válida."""
        folio = _texto_requerido(folio, "Folio", "INVALID_FOLIO")
        licencia = await self.almacen.buscar_por_folio(folio)
        if licencia is None:
            return Verificacion(valid=False, encontrada=False)
        return Verificacion(valid=licencia.status == EstadoLicencia.ISSUED)
