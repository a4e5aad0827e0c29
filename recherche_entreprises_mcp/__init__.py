"""ABOUTME: MCP server for searching French businesses via the API Recherche d'Entreprises."""

__version__ = "1.0.0"
