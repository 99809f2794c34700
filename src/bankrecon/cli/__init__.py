"""Command-line interface for bankrecon."""
