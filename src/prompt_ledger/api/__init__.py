"""HTTP API for the Prompt Ledger application."""
