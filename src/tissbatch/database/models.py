"""SQLAlchemy models for tissbatch database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Index,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


class Batch(Base):
    """Billing batch (lote) model."""

    __tablename__ = "batches"

    id = Column(Integer, primary_key=True)
    batch_number = Column(String(50), nullable=False)
    xml_filename = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Header (cabecalho) fields, filled by reconciliation
    transaction_type = Column(String(50), nullable=True)
    transaction_sequence = Column(String(50), nullable=True)
    registration_date = Column(String(10), nullable=True)
    registration_time = Column(String(8), nullable=True)
    provider_tax_id = Column(String(20), nullable=True)
    provider_name = Column(String(255), nullable=True)
    payer_registry = Column(String(20), nullable=True)
    tiss_standard = Column(String(20), nullable=True)
    integrity_hash = Column(String(128), nullable=True)
    facility_cnes = Column(String(20), nullable=True)

    # Incremented on every header write; guards the load/write sequence
    header_version = Column(Integer, default=0, nullable=False)
    reconciled_at = Column(DateTime, nullable=True)

    __table_args__ = (Index("ix_batches_batch_number", "batch_number"),)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory.

    Tables are not created here; see SQLAlchemyBatchStore.initialize_schema.
    """
    engine = create_engine(database_url, echo=False)
    return sessionmaker(bind=engine)
