"""Command-line interface for the Twenty CRM code generator."""
