# mock_licencias/comun/errores.py

from enum import Enum
from typing import Optional


class TipoError(str, Enum):
    CAMPO_INVALIDO = "invalid_field"
    NO_ENCONTRADO = "not_found"
    UPSTREAM = "upstream_error"
    SERVICIO_NO_DISPONIBLE = "service_unavailable"
    COMUNICACION = "communication_error"
    FOLIO_AGOTADO = "folio_generation_exhausted"
    INTERNO = "internal_error"


STATUS_POR_TIPO = {
    TipoError.CAMPO_INVALIDO: 400,
    TipoError.NO_ENCONTRADO: 404,
    TipoError.UPSTREAM: 502,
    TipoError.SERVICIO_NO_DISPONIBLE: 503,
    TipoError.COMUNICACION: 500,
    TipoError.FOLIO_AGOTADO: 500,
    TipoError.INTERNO: 500,
}


class ErrorServicio(Exception):
    """
    Error único de los microservicios, discriminado por `tipo`.

    Cada variante lleva un código estable (`codigo`) y el status HTTP con el
    que se responde en la frontera. Se construye con los métodos de clase.
    """

    def __init__(
        self,
        tipo: TipoError,
        mensaje: str,
        codigo: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(mensaje)
        self.tipo = tipo
        self.mensaje = mensaje
        self.codigo = codigo
        self.status_code = status_code or STATUS_POR_TIPO[tipo]

    def __repr__(self) -> str:
        return (
            f"ErrorServicio(tipo={self.tipo.value!r}, codigo={self.codigo!r}, "
            f"status_code={self.status_code}, mensaje={self.mensaje!r})"
        )

    @classmethod
    def campo_invalido(cls, mensaje: str, codigo: str) -> "ErrorServicio":
        return cls(TipoError.CAMPO_INVALIDO, mensaje, codigo)

    @classmethod
    def no_encontrado(cls, mensaje: str = "License not found") -> "ErrorServicio":
        return cls(TipoError.NO_ENCONTRADO, mensaje, "NOT_FOUND")

    @classmethod
    def upstream(cls, mensaje: str, status_code: int, codigo: Optional[str] = None) -> "ErrorServicio":
        return cls(TipoError.UPSTREAM, mensaje, codigo, status_code)

    @classmethod
    def respuesta_invalida(cls, mensaje: str) -> "ErrorServicio":
        """Respuesta 2xx del servicio de Licencias sin `success: true`."""
        return cls(TipoError.UPSTREAM, mensaje, "SERVICE_ERROR", 500)

    @classmethod
    def servicio_no_disponible(cls, mensaje: str = "License service is unavailable") -> "ErrorServicio":
        return cls(TipoError.SERVICIO_NO_DISPONIBLE, mensaje, "SERVICE_UNAVAILABLE")

    @classmethod
    def comunicacion(cls, mensaje: str = "Failed to communicate with license service") -> "ErrorServicio":
        return cls(TipoError.COMUNICACION, mensaje, "COMMUNICATION_ERROR")

    @classmethod
    def folio_agotado(cls, intentos: int) -> "ErrorServicio":
        return cls(
            TipoError.FOLIO_AGOTADO,
            f"Unable to generate unique folio after {intentos} attempts",
            "FOLIO_GENERATION_EXHAUSTED",
        )

    @classmethod
    def interno(cls, mensaje: str, codigo: str = "INTERNAL_ERROR") -> "ErrorServicio":
        return cls(TipoError.INTERNO, mensaje, codigo)
