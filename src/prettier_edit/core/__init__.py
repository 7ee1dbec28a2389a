"""Core types, documents, protocols and exceptions."""
