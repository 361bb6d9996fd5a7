"""CLI commands for ledgerkit."""
