"""TISS batch document parser.

Reads the parts of a ``mensagemTISS`` document that batch reconciliation
needs: the transaction header (cabecalho), the batch (loteGuias) metadata,
the payer (operadora) block and the epilogue hash. Guides, procedures and
expenses are not read.

Elements are matched by local name, so documents using the ``ans``
namespace prefix and documents without a namespace are handled alike.
"""

import hashlib
import logging
from typing import Callable, Optional
from xml.etree.ElementTree import Element

import defusedxml.ElementTree as ET
from defusedxml import DefusedXmlException

from tissbatch.domain.entities import BatchHeader, BatchInfo, ParsedBatchDocument, PayerInfo
from tissbatch.domain.errors import MalformedDocumentError
from tissbatch.utils.amount_parser import parse_amount
from tissbatch.utils.date_parser import (
    competencia_from_date,
    parse_registration_date,
    parse_registration_time,
)

logger = logging.getLogger(__name__)

ROOT_TAG = "mensagemTISS"


def _local_name(tag: str) -> str:
    """Strip a "{namespace}" qualifier from an element tag."""
    if tag.startswith("{"):
        return tag.rsplit("}", 1)[1]
    return tag


def _child(element: Optional[Element], *names: str) -> Optional[Element]:
    """Return the first direct child whose local name is one of ``names``."""
    if element is None:
        return None
    for name in names:
        for child in element:
            if _local_name(child.tag) == name:
                return child
    return None


def _path(element: Optional[Element], *steps: str) -> Optional[Element]:
    for step in steps:
        element = _child(element, step)
    return element


def _text(element: Optional[Element], *names: str) -> Optional[str]:
    """Text of the first matching child, or None when absent or blank."""
    child = _child(element, *names)
    if child is None or child.text is None:
        return None
    value = child.text.strip()
    return value or None


def parse_tiss_xml(content: bytes) -> ParsedBatchDocument:
    """Parse a TISS batch document.

    Args:
        content: Raw bytes of the XML file

    Returns:
        ParsedBatchDocument with header, batch and payer sections

    Raises:
        MalformedDocumentError: If the bytes are not XML, the root is not
            ``mensagemTISS`` or ``loteGuias`` is missing. An unreadable
            registration date or time is kept as written instead.
    """
    try:
        root = ET.fromstring(content)
    except (ET.ParseError, DefusedXmlException) as e:
        raise MalformedDocumentError(f"Invalid XML: {e}")

    if _local_name(root.tag) != ROOT_TAG:
        raise MalformedDocumentError(
            f"Invalid TISS document: root element is '{_local_name(root.tag)}', "
            f"expected '{ROOT_TAG}'"
        )

    lote_guias = _path(root, "prestadorParaOperadora", "loteGuias")
    if lote_guias is None:
        raise MalformedDocumentError("Invalid TISS document: loteGuias not found")

    epilogue_hash = _text(_child(root, "epilogo"), "hash")
    header = _parse_header(_child(root, "cabecalho"), epilogue_hash)

    document = ParsedBatchDocument(
        header=header,
        batch_info=_parse_batch_info(lote_guias, header),
        payer_info=_parse_payer_info(lote_guias),
        content_md5=hashlib.md5(content).hexdigest(),
    )
    logger.debug(
        "Parsed TISS document md5=%s header=%s",
        document.content_md5,
        "present" if header is not None else "absent",
    )
    return document


def _normalised(value: Optional[str], normalise: Callable[[str], str]) -> Optional[str]:
    """Normalised value, or the document's own text when it cannot be read."""
    if value is None:
        return None
    try:
        return normalise(value)
    except ValueError as e:
        logger.warning("Keeping header value as written: %s", e)
        return value


def _parse_header(cabecalho: Optional[Element], epilogue_hash: Optional[str]) -> Optional[BatchHeader]:
    if cabecalho is None:
        if epilogue_hash is None:
            return None
        return BatchHeader(integrity_hash=epilogue_hash)

    identification = _child(cabecalho, "identificacaoTransacao")
    provider = _path(cabecalho, "origem", "identificacaoPrestador")
    destination = _child(cabecalho, "destino")

    return BatchHeader(
        transaction_type=_text(identification, "tipoTransacao"),
        transaction_sequence=_text(identification, "sequencialTransacao"),
        registration_date=_normalised(
            _text(identification, "dataRegistroTransacao"), parse_registration_date
        ),
        registration_time=_normalised(
            _text(identification, "horaRegistroTransacao"), parse_registration_time
        ),
        provider_tax_id=_text(provider, "CNPJ", "cnpj"),
        provider_name=_text(provider, "nomeContratadoSolicitante"),
        payer_registry=_text(destination, "registroANS"),
        tiss_standard=_text(cabecalho, "Padrao", "padrao"),
        # The epilogue hash is the one computed over the whole message.
        integrity_hash=epilogue_hash or _text(cabecalho, "hash"),
        facility_cnes=_text(provider, "CNES", "cnes"),
    )


def _parse_batch_info(lote_guias: Element, header: Optional[BatchHeader]) -> Optional[BatchInfo]:
    batch_number = _text(lote_guias, "numeroLote")
    billing_period = _text(lote_guias, "competencia")
    submission_date = _text(lote_guias, "dataEnvio")
    raw_total = _text(lote_guias, "valorTotal")

    total_value = None
    if raw_total is not None:
        try:
            total_value = parse_amount(raw_total)
        except ValueError:
            logger.debug("Ignoring unreadable batch total '%s'", raw_total)

    if billing_period is None and header is not None and header.registration_date:
        try:
            billing_period = competencia_from_date(header.registration_date)
        except ValueError:
            logger.debug("No billing period derivable from '%s'", header.registration_date)

    if all(v is None for v in (batch_number, billing_period, submission_date, total_value)):
        return None
    return BatchInfo(
        batch_number=batch_number,
        billing_period=billing_period,
        submission_date=submission_date,
        total_value=total_value,
    )


def _parse_payer_info(lote_guias: Element) -> Optional[PayerInfo]:
    operadora = _child(lote_guias, "operadora")
    if operadora is None:
        return None
    return PayerInfo(
        registry_number=_text(operadora, "registroANS", "registro_ans"),
        name=_text(operadora, "nome"),
    )
