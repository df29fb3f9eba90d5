"""Fluent client helpers for the SharePoint REST API and CSOM responses."""

__version__ = "0.1.0"