"""Utility functions for ledgerbook."""

from ledgerbook.utils.date_parser import parse_date
from ledgerbook.utils.money import format_amount, from_cents, parse_amount, to_cents

__all__ = ["parse_date", "parse_amount", "format_amount", "from_cents", "to_cents"]
