"""Shared pytest fixtures for tissbatch tests."""

import tempfile
import os
import pytest

from tissbatch.database.factories import create_sqlite_database
from tissbatch.domain.backlog import BacklogService
from tissbatch.domain.reconciliation import ReconciliationService


TISS_NAMESPACE = "http://www.ans.gov.br/padroes/tiss/schemas"

DEFAULT_HEADER = {
    "tipoTransacao": "ENVIO_LOTE_GUIAS",
    "sequencialTransacao": "1001",
    "dataRegistroTransacao": "2024-03-15",
    "horaRegistroTransacao": "14:30:00",
    "CNPJ": "12345678000199",
    "nomeContratadoSolicitante": "Clinica Oncologica Teste",
    "CNES": "1234567",
    "registroANS": "412589",
    "Padrao": "4.01.00",
}

DEFAULT_HASH = "3f2a9c0e1b7d4a5f8e6c2b1a0d9f8e7c"


def build_tiss_xml(
    header=None,
    *,
    omit=(),
    include_cabecalho=True,
    epilogue_hash=DEFAULT_HASH,
    header_hash=None,
    batch_number="0001",
    competencia=None,
    total_value="1500.50",
    payer=("412589", "Operadora Teste"),
    namespaced=True,
    encoding="UTF-8",
) -> bytes:
    """Build a minimal TISS batch document.

    Header values default to DEFAULT_HEADER; names in ``omit`` are left out.
    """
    p = "ans:" if namespaced else ""
    values = dict(DEFAULT_HEADER)
    values.update(header or {})
    for name in omit:
        values.pop(name, None)

    def el(tag, value):
        if value is None:
            return ""
        return f"<{p}{tag}>{value}</{p}{tag}>"

    cabecalho = ""
    if include_cabecalho:
        cabecalho = (
            f"<{p}cabecalho>"
            f"<{p}identificacaoTransacao>"
            + el("tipoTransacao", values.get("tipoTransacao"))
            + el("sequencialTransacao", values.get("sequencialTransacao"))
            + el("dataRegistroTransacao", values.get("dataRegistroTransacao"))
            + el("horaRegistroTransacao", values.get("horaRegistroTransacao"))
            + f"</{p}identificacaoTransacao>"
            f"<{p}origem><{p}identificacaoPrestador>"
            + el("CNPJ", values.get("CNPJ"))
            + el("nomeContratadoSolicitante", values.get("nomeContratadoSolicitante"))
            + el("CNES", values.get("CNES"))
            + f"</{p}identificacaoPrestador></{p}origem>"
            f"<{p}destino>" + el("registroANS", values.get("registroANS")) + f"</{p}destino>"
            + el("Padrao", values.get("Padrao"))
            + el("hash", header_hash)
            + f"</{p}cabecalho>"
        )

    operadora = ""
    if payer is not None:
        operadora = (
            f"<{p}operadora>" + el("registroANS", payer[0]) + el("nome", payer[1]) + f"</{p}operadora>"
        )

    epilogo = ""
    if epilogue_hash is not None:
        epilogo = f"<{p}epilogo>" + el("hash", epilogue_hash) + f"</{p}epilogo>"

    xmlns = f' xmlns:ans="{TISS_NAMESPACE}"' if namespaced else ""
    document = (
        f'<?xml version="1.0" encoding="{encoding}"?>'
        f"<{p}mensagemTISS{xmlns}>"
        + cabecalho
        + f"<{p}prestadorParaOperadora><{p}loteGuias>"
        + el("numeroLote", batch_number)
        + el("competencia", competencia)
        + el("valorTotal", total_value)
        + operadora
        + f"<{p}guiasTISS/>"
        + f"</{p}loteGuias></{p}prestadorParaOperadora>"
        + epilogo
        + f"</{p}mensagemTISS>"
    )
    return document.encode("latin-1" if encoding.upper() == "ISO-8859-1" else "utf-8")


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def upload_dir(tmp_path):
    """Create an empty upload directory for batch XML files."""
    path = tmp_path / "uploads" / "financeiro"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def tiss_xml():
    """Return the TISS document builder."""
    return build_tiss_xml


@pytest.fixture
def make_batch(temp_db, upload_dir):
    """Create a batch record and, unless content is None, its XML file."""

    def _make_batch(batch_number="0001", content=b"", filename=None):
        filename = filename or f"lote_{batch_number}.xml"
        if content is not None:
            (upload_dir / filename).write_bytes(content or build_tiss_xml(batch_number=batch_number))
        return temp_db.create_batch(batch_number=batch_number, xml_filename=filename)

    return _make_batch


@pytest.fixture
def backlog_service(temp_db):
    """Create a BacklogService with a temporary database."""
    return BacklogService(temp_db)


@pytest.fixture
def reconciliation_service(temp_db, upload_dir):
    """Create a ReconciliationService over the temporary database and upload dir."""
    return ReconciliationService(temp_db, upload_dir)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
