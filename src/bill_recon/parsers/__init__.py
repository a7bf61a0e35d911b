"""Parsers for bill and transaction exports."""

from .bill_parser import BillParser, write_bills
from .transaction_parser import TransactionParser

__all__ = ["BillParser", "TransactionParser", "write_bills"]
