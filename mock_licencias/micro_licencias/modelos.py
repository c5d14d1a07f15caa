# mock_licencias/micro_licencias/modelos.py

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class EstadoLicencia(str, Enum):
    ISSUED = "issued"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class Licencia(BaseModel):
    """Licencia médica tal como se guarda y se expone (claves camelCase)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        json_schema_extra={
            "example": {
                "folio": "LIC-1758844800000-A1B2C3",
                "patientId": "11111111-1",
                "doctorId": "DOC123",
                "diagnosis": "Gripe común",
                "startDate": "2025-09-26",
                "days": 7,
                "status": "issued",
                "createdAt": "2025-09-26T12:00:00Z",
            }
        },
    )

    folio: str
    patient_id: str
    doctor_id: str
    diagnosis: str
    start_date: date
    days: int = Field(ge=1)
    status: EstadoLicencia = EstadoLicencia.ISSUED
    created_at: datetime

    def vista(self, incluir_creacion: bool = True) -> dict:
        """Diccionario JSON listo para el sobre de respuesta."""
        excluir = None if incluir_creacion else {"created_at"}
        return self.model_dump(mode="json", by_alias=True, exclude=excluir)


class Verificacion(BaseModel):
    valid: bool
    # Distingue "no existe" de "existe pero no está emitida"; no se serializa
    encontrada: bool = Field(default=True, exclude=True)
