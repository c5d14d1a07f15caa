# mock_licencias/comun/config.py

"""
Configuración de los microservicios.

Cada servicio recibe su objeto de configuración en `crear_app`; los valores
se leen del entorno (o de un `.env`) solo cuando se instancia la clase.
"""

from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

NivelLog = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class ConfigBase(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    port: int = 3000
    log_level: NivelLog = "INFO"


class ConfigLicencias(ConfigBase):
    """Servicio de Licencias: puerto, almacén y estados de Pact."""

    nombre_servicio: str = "Licencias Service"
    port: int = 3001
    # Sin URL se usa el almacén en memoria
    database_url: Optional[str] = Field(
        default=None,
        description="URL asíncrona de SQLAlchemy, p. ej. sqlite+aiosqlite:///./licencias.db",
    )
    pact_states_enabled: bool = False


class ConfigAdaptador(ConfigBase):
    nombre_servicio: str = "Adaptador Licencias"
    licenses_service_url: str = "http://localhost:3001"
    request_timeout: float = Field(default=5.0, gt=0)


class ConfigPortal(ConfigAdaptador):
    nombre_servicio: str = "Portal Paciente Service"
    port: int = 3002


class ConfigValidador(ConfigAdaptador):
    nombre_servicio: str = "Validador Aseguradora Service"
    port: int = 3003
