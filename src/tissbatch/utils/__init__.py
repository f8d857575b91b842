"""Utility functions for tissbatch."""

from tissbatch.utils.amount_parser import parse_amount
from tissbatch.utils.date_parser import parse_registration_date, parse_registration_time
from tissbatch.utils.tiss_parser import parse_tiss_xml
from tissbatch.utils.upload_paths import resolve_batch_file, resolve_upload_root

__all__ = [
    "parse_amount",
    "parse_registration_date",
    "parse_registration_time",
    "parse_tiss_xml",
    "resolve_batch_file",
    "resolve_upload_root",
]
