# tests/conftest.py

import sys
import os
from datetime import date, datetime, timezone

import pytest
import allure
import shutil
from fastapi.testclient import TestClient

import log_config
from loguru import logger


# Redirige stdout/stderr SOLO durante el test, no de forma global
class StreamToLogger:
    def __init__(self, level):
        self.level = level

    def write(self, message):
        if message.strip():
            for line in message.rstrip().splitlines():
                logger.log(self.level, line.rstrip())

    def flush(self):
        pass


# Inyectamos la carpeta raíz para importar bien
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from mock_licencias.comun.config import ConfigLicencias  # noqa: E402
from mock_licencias.micro_licencias import AlmacenMemoria, EstadoLicencia, Licencia, crear_app  # noqa: E402

MICROS = {
    "licencias": "http://localhost:3001",
    "portal_paciente": "http://localhost:3002",
    "validador_aseguradora": "http://localhost:3003",
}


@pytest.fixture
def fabrica_licencia():
    """Construye licencias ya emitidas para sembrar el almacén."""
    def _crear(folio="L-1001", patient_id="11111111-1", status=EstadoLicencia.ISSUED, created_at=None, **extra):
        datos = {
            "folio": folio,
            "patient_id": patient_id,
            "doctor_id": "DOC123",
            "diagnosis": "Gripe común",
            "start_date": date(2025, 9, 26),
            "days": 7,
            "status": status,
            "created_at": created_at or datetime(2025, 9, 26, 12, 0, tzinfo=timezone.utc),
        }
        datos.update(extra)
        return Licencia(**datos)

    return _crear


@pytest.fixture
def almacen():
    return AlmacenMemoria()


@pytest.fixture
def app_licencias(almacen):
    return crear_app(ConfigLicencias(pact_states_enabled=True), almacen=almacen)


@pytest.fixture
def cliente_licencias_http(app_licencias):
    with TestClient(app_licencias) as client:
        yield client


@pytest.fixture
def record_api_call():
    """Hace la llamada con el cliente dado y adjunta petición y respuesta a Allure."""
    def _call(client, method: str, path: str, **kwargs):
        with allure.step(f"{method.upper()} {path}"):
            resp = client.request(method, path, **kwargs)
            allure.attach(
                f"{resp.request.method} {resp.request.url}\n\n"
                f"{(resp.request.content or b'').decode(errors='ignore')}",
                name="Petición",
                attachment_type=allure.attachment_type.TEXT
            )
            allure.attach(
                f"{resp.status_code}\n\n{resp.text}",
                name="Respuesta",
                attachment_type=allure.attachment_type.JSON
            )
        return resp

    return _call


@pytest.fixture(scope="session", autouse=True)
def allure_environment():
    env = {k.upper(): v for k, v in MICROS.items()}
    props = "\n".join(f"{k}={v}" for k, v in env.items())
    out_dir = os.getenv("ALLURE_RESULTS_DIR", "reports/unit_results")
    os.makedirs(out_dir, exist_ok=True)
    with open(os.path.join(out_dir, "environment.properties"), "w") as f:
        f.write(props)


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    outcome = yield
    rep = outcome.get_result()
    setattr(item, f"rep_{rep.when}", rep)


# Logging automático en cada test
@pytest.fixture(autouse=True)
def log_test_info(request):
    # Redirige stdout/stderr temporalmente
    old_stdout, old_stderr = sys.stdout, sys.stderr
    sys.stdout = StreamToLogger("INFO")
    sys.stderr = StreamToLogger("ERROR")

    logger.info(f"[test] 🧪 Inicio: {request.node.nodeid}")
    yield
    if hasattr(request.node, "rep_call") and request.node.rep_call.failed:
        logger.error(f"[test] ❌ Falló: {request.node.nodeid}")
    else:
        logger.success(f"[test] ✅ OK: {request.node.nodeid}")

    sys.stdout = old_stdout
    sys.stderr = old_stderr


@pytest.hookimpl(trylast=True)
def pytest_sessionfinish(session, exitstatus):
    try:
        log_path = log_config.get_log_file()
        allure_dir = os.getenv("ALLURE_RESULTS_DIR", "reports/unit_results")
        os.makedirs(allure_dir, exist_ok=True)
        dest_path = os.path.join(allure_dir, os.path.basename(log_path))

        shutil.copy(log_path, dest_path)
        logger.info(f"[log] 📝 Log adjuntado a Allure: {dest_path}")
    except OSError as e:
        # No usamos logger aquí por si el sink ya está cerrado
        print(f"[log] ❌ Error al copiar log a Allure: {e}")
