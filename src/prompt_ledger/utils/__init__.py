"""Shared helpers for the Prompt Ledger application."""
