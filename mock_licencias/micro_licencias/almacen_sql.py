# mock_licencias/micro_licencias/almacen_sql.py

"""Almacén de licencias sobre SQLAlchemy asíncrono."""

import logging
from datetime import date, datetime, timezone
from typing import Any, List, Optional

from sqlalchemy import CheckConstraint, Date, DateTime, Index, Integer, String, Text, delete, select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from .almacen import AlmacenLicencias, FolioDuplicadoError
from .modelos import EstadoLicencia, Licencia

logger = logging.getLogger("micro_licencias")


class Base(DeclarativeBase):
    pass


class LicenciaORM(Base):
    __tablename__ = "licenses"
    __table_args__ = (
        CheckConstraint("days >= 1", name="ck_licenses_days_positive"),
        Index("ix_licenses_patient_created", "patient_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    folio: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)
    patient_id: Mapped[str] = mapped_column(String(64), nullable=False)
    doctor_id: Mapped[str] = mapped_column(String(64), nullable=False)
    diagnosis: Mapped[str] = mapped_column(Text, nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    days: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=EstadoLicencia.ISSUED.value)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def a_licencia(self) -> Licencia:
        creada = self.created_at
        # SQLite devuelve fechas sin zona horaria
        if creada.tzinfo is None:
            creada = creada.replace(tzinfo=timezone.utc)
        return Licencia(
            folio=self.folio,
            patient_id=self.patient_id,
            doctor_id=self.doctor_id,
            diagnosis=self.diagnosis,
            start_date=self.start_date,
            days=self.days,
            status=EstadoLicencia(self.status),
            created_at=creada,
        )


class AlmacenSQL(AlmacenLicencias):
    def __init__(self, database_url: str, **opciones_engine: Any):
        self.engine = create_async_engine(database_url, echo=False, **opciones_engine)
        self.session_maker = async_sessionmaker(self.engine, class_=AsyncSession, expire_on_commit=False)

    async def inicializar(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("[LICENCIAS] Tablas del almacén SQL verificadas")

    async def cerrar(self) -> None:
        await self.engine.dispose()

    async def buscar_por_folio(self, folio: str) -> Optional[Licencia]:
        async with self.session_maker() as session:
            fila = await session.scalar(select(LicenciaORM).where(LicenciaORM.folio == folio))
            return fila.a_licencia() if fila else None

    async def buscar_por_paciente(self, patient_id: str) -> List[Licencia]:
        consulta = (
            select(LicenciaORM)
            .where(LicenciaORM.patient_id == patient_id)
            .order_by(LicenciaORM.created_at.desc(), LicenciaORM.id.desc())
        )
        async with self.session_maker() as session:
            filas = await session.scalars(consulta)
            return [fila.a_licencia() for fila in filas]

    async def guardar(self, licencia: Licencia) -> Licencia:
        fila = LicenciaORM(
            folio=licencia.folio,
            patient_id=licencia.patient_id,
            doctor_id=licencia.doctor_id,
            diagnosis=licencia.diagnosis,
            start_date=licencia.start_date,
            days=licencia.days,
            status=licencia.status.value,
            created_at=licencia.created_at,
        )
        async with self.session_maker() as session:
            session.add(fila)
            try:
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                raise FolioDuplicadoError(licencia.folio) from e
        return fila.a_licencia()

    async def eliminar_por_folio(self, folio: str) -> int:
        async with self.session_maker() as session:
            resultado = await session.execute(delete(LicenciaORM).where(LicenciaORM.folio == folio))
            await session.commit()
            return resultado.rowcount

    async def eliminar_por_paciente(self, patient_id: str) -> int:
        async with self.session_maker() as session:
            resultado = await session.execute(delete(LicenciaORM).where(LicenciaORM.patient_id == patient_id))
            await session.commit()
            return resultado.rowcount

    async def ping(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.warning(f"[LICENCIAS] El almacén SQL no responde: {e}")
            return False
        return True
