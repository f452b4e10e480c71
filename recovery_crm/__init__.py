"""Loan-recovery agency CRM API."""

__version__ = "0.01.00"
