# mock_licencias/comun/cliente_licencias.py

"""
Cliente HTTP del servicio de Licencias, compartido por el portal del
paciente y el validador de la aseguradora.

No reintenta: cada fallo se traduce a un `ErrorServicio`.
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from .errores import ErrorServicio

logger = logging.getLogger("cliente_licencias")

# Fallos en los que no llegó respuesta del servicio
ERRORES_SIN_RESPUESTA = (httpx.TimeoutException, httpx.NetworkError, httpx.RemoteProtocolError)


def _id_requerido(valor: Any, nombre: str, codigo: str) -> str:
    if not isinstance(valor, str) or not valor.strip():
        raise ErrorServicio.campo_invalido(f"{nombre} is required and must be a non-empty string", codigo)
    return valor.strip()


def _cuerpo_json(response: httpx.Response) -> Dict[str, Any]:
    try:
        cuerpo = response.json()
    except ValueError:
        return {}
    return cuerpo if isinstance(cuerpo, dict) else {}


class ClienteLicencias:
    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def _get(self, ruta: str, params: Optional[Dict[str, str]] = None) -> httpx.Response:
        url = f"{self.base_url}{ruta}"
        logger.info(f"[CLIENTE] GET {url} params={params}")
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                return await client.get(url, params=params)
        except ERRORES_SIN_RESPUESTA as e:
            logger.error(f"[CLIENTE] Sin respuesta de {url}: {e!r}")
            raise ErrorServicio.servicio_no_disponible() from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"[CLIENTE] Error al construir o enviar la petición a {url}: {e!r}")
            raise ErrorServicio.comunicacion() from e

    @staticmethod
    def _error_upstream(response: httpx.Response) -> ErrorServicio:
        cuerpo = _cuerpo_json(response)
        logger.warning(f"[CLIENTE] Licencias respondió {response.status_code}: {cuerpo}")
        return ErrorServicio.upstream(
            cuerpo.get("error") or "License service error",
            response.status_code,
            cuerpo.get("code"),
        )

    @staticmethod
    def _datos(response: httpx.Response, mensaje_fallo: str, vacio: Any) -> Any:
        cuerpo = _cuerpo_json(response)
        if cuerpo.get("success") is not True:
            logger.warning(f"[CLIENTE] Licencias respondió {response.status_code} sin success: {cuerpo}")
            raise ErrorServicio.respuesta_invalida(mensaje_fallo)
        datos = cuerpo.get("data")
        return vacio if datos is None else datos

    async def licencias_por_paciente(self, patient_id: Any) -> List[Dict[str, Any]]:
        """Licencias del paciente, de la más reciente a la más antigua."""
        patient_id = _id_requerido(patient_id, "patientId", "INVALID_PATIENT_ID")
        response = await self._get("/licenses", params={"patientId": patient_id})

        if not response.is_success:
            raise self._error_upstream(response)
        return self._datos(response, "Failed to retrieve licenses", [])

    async def verificar_licencia(self, folio: Any) -> Dict[str, bool]:
        """
        Verifica un folio.

        Un 404 del servicio de Licencias no es un error: para quien consulta,
        un folio inexistente y uno no válido son lo mismo.
        """
        folio = _id_requerido(folio, "folio", "INVALID_FOLIO")
        response = await self._get(f"/licenses/{quote(folio, safe='')}/verify")

        if response.status_code == 404:
            return {"valid": False}
        if not response.is_success:
            raise self._error_upstream(response)
        return self._datos(response, "Failed to verify license", {"valid": False})
