# tests/unit/test_almacen_sql_unit.py

from datetime import datetime, timezone

import pytest
import pytest_asyncio
import allure
from sqlalchemy.pool import StaticPool

from mock_licencias.comun.errores import ErrorServicio
from mock_licencias.micro_licencias import MAX_DIAS, EstadoLicencia, FolioDuplicadoError, ServicioLicencias
from mock_licencias.micro_licencias.almacen_sql import AlmacenSQL


@pytest_asyncio.fixture
async def almacen_sql():
    almacen = AlmacenSQL(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await almacen.inicializar()
    yield almacen
    await almacen.cerrar()


@allure.tag("micro:licencias", "tipo:unitario")
@allure.feature("Microservicio Licencias")
@allure.story("Almacén SQL")
@pytest.mark.unit
@pytest.mark.micro_licencias
@pytest.mark.asyncio
async def test_guardar_y_buscar(almacen_sql, fabrica_licencia):
    guardada = await almacen_sql.guardar(fabrica_licencia())
    encontrada = await almacen_sql.buscar_por_folio("L-1001")

    assert encontrada == guardada
    assert encontrada.status == EstadoLicencia.ISSUED
    assert encontrada.created_at.tzinfo is not None
    assert await almacen_sql.buscar_por_folio("L-404") is None
    assert await almacen_sql.ping() is True


@allure.tag("micro:licencias", "tipo:unitario")
@allure.feature("Microservicio Licencias")
@allure.story("Almacén SQL")
@pytest.mark.unit
@pytest.mark.micro_licencias
@pytest.mark.asyncio
async def test_folio_unico(almacen_sql, fabrica_licencia):
    """El índice único sobre folio rechaza el segundo guardado."""
    await almacen_sql.guardar(fabrica_licencia())
    with pytest.raises(FolioDuplicadoError):
        await almacen_sql.guardar(fabrica_licencia(patient_id="33333333-3"))
    assert len(await almacen_sql.buscar_por_paciente("33333333-3")) == 0


@allure.tag("micro:licencias", "tipo:unitario")
@allure.feature("Microservicio Licencias")
@allure.story("Almacén SQL")
@pytest.mark.unit
@pytest.mark.micro_licencias
@pytest.mark.asyncio
async def test_orden_por_creacion_y_borrado(almacen_sql, fabrica_licencia):
    for dia, folio in [(2, "L-B"), (5, "L-E"), (1, "L-A")]:
        await almacen_sql.guardar(
            fabrica_licencia(folio=folio, created_at=datetime(2025, 9, dia, tzinfo=timezone.utc))
        )

    licencias = await almacen_sql.buscar_por_paciente("11111111-1")
    assert [lic.folio for lic in licencias] == ["L-E", "L-B", "L-A"]

    assert await almacen_sql.eliminar_por_folio("L-B") == 1
    assert await almacen_sql.eliminar_por_folio("L-B") == 0
    assert await almacen_sql.eliminar_por_paciente("11111111-1") == 2
    assert await almacen_sql.buscar_por_paciente("11111111-1") == []


@allure.tag("micro:licencias", "tipo:unitario")
@allure.feature("Microservicio Licencias")
@allure.story("Almacén SQL")
@pytest.mark.unit
@pytest.mark.micro_licencias
@pytest.mark.asyncio
async def test_servicio_sobre_almacen_sql(almacen_sql):
    servicio = ServicioLicencias(almacen_sql)
    licencia = await servicio.crear_licencia("11111111-1", "DOC123", "Gripe común", "2025-09-26", 7)

    assert (await servicio.obtener_por_folio(licencia.folio)).folio == licencia.folio
    assert (await servicio.verificar_licencia(licencia.folio)).valid is True


@allure.tag("micro:licencias", "tipo:unitario")
@allure.feature("Microservicio Licencias")
@allure.story("Almacén SQL")
@pytest.mark.unit
@pytest.mark.micro_licencias
@pytest.mark.asyncio
async def test_empate_en_creacion_ultima_guardada_primero(almacen_sql, fabrica_licencia):
    for folio in ["L-1", "L-2", "L-3"]:
        await almacen_sql.guardar(fabrica_licencia(folio=folio))

    licencias = await almacen_sql.buscar_por_paciente("11111111-1")
    assert [lic.folio for lic in licencias] == ["L-3", "L-2", "L-1"]


@allure.tag("micro:licencias", "tipo:unitario")
@allure.feature("Microservicio Licencias")
@allure.story("Almacén SQL")
@pytest.mark.unit
@pytest.mark.micro_licencias
@pytest.mark.asyncio
async def test_days_desmesurado_no_llega_al_almacen(almacen_sql):
    servicio = ServicioLicencias(almacen_sql)
    with pytest.raises(ErrorServicio) as exc:
        await servicio.crear_licencia("11111111-1", "DOC123", "Gripe común", "2025-09-26", 10**30)
    assert exc.value.codigo == "INVALID_DAYS"

    licencia = await servicio.crear_licencia("11111111-1", "DOC123", "Gripe común", "2025-09-26", MAX_DIAS)
    assert (await almacen_sql.buscar_por_folio(licencia.folio)).days == MAX_DIAS
