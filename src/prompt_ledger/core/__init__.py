"""Core configuration for the Prompt Ledger application."""
