"""Orchestration layer: embedding batcher and the document, search and CSV services."""
