# mock_licencias/micro_licencias/almacen.py

"""
Puerto del almacén de licencias y su implementación en memoria.

La implementación SQL vive en `almacen_sql`.
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

from .modelos import Licencia


class FolioDuplicadoError(Exception):
    """El almacén ya tiene una licencia con ese folio."""

    def __init__(self, folio: str):
        super().__init__(f"Duplicate folio: {folio}")
        self.folio = folio


class AlmacenLicencias(ABC):
    """Colección persistente de licencias indexada por folio."""

    async def inicializar(self) -> None:
        pass

    async def cerrar(self) -> None:
        pass

    @abstractmethod
    async def buscar_por_folio(self, folio: str) -> Optional[Licencia]:
        pass

    @abstractmethod
    async def buscar_por_paciente(self, patient_id: str) -> List[Licencia]:
        """
        Licencias del paciente ordenadas por `created_at` descendente.
        """

    @abstractmethod
    async def guardar(self, licencia: Licencia) -> Licencia:
        """
        Crea la licencia de forma atómica.

        Raises:
            FolioDuplicadoError: si el folio ya existe.
        """

    @abstractmethod
    async def eliminar_por_folio(self, folio: str) -> int:
        pass

    @abstractmethod
    async def eliminar_por_paciente(self, patient_id: str) -> int:
        pass

    @abstractmethod
    async def ping(self) -> bool:
        pass


class AlmacenMemoria(AlmacenLicencias):
    def __init__(self, licencias: Iterable[Licencia] = ()):
        self._licencias: Dict[str, Licencia] = {}
        for licencia in licencias:
            self._licencias[licencia.folio] = licencia

    async def buscar_por_folio(self, folio: str) -> Optional[Licencia]:
        return self._licencias.get(folio)

    async def buscar_por_paciente(self, patient_id: str) -> List[Licencia]:
        # A igual createdAt, la última guardada primero
        del_paciente = [
            (lic.created_at, orden, lic)
            for orden, lic in enumerate(self._licencias.values())
            if lic.patient_id == patient_id
        ]
        del_paciente.sort(key=lambda t: t[:2], reverse=True)
        return [lic for _, _, lic in del_paciente]

    async def guardar(self, licencia: Licencia) -> Licencia:
        if licencia.folio in self._licencias:
            raise FolioDuplicadoError(licencia.folio)
        self._licencias[licencia.folio] = licencia
        return licencia

    async def eliminar_por_folio(self, folio: str) -> int:
        return 1 if self._licencias.pop(folio, None) is not None else 0

    async def eliminar_por_paciente(self, patient_id: str) -> int:
        folios = [f for f, lic in self._licencias.items() if lic.patient_id == patient_id]
        for folio in folios:
            del self._licencias[folio]
        return len(folios)

    async def ping(self) -> bool:
        return True
