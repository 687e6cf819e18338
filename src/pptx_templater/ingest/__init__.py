# src/pptx_templater/ingest/__init__.py
"""
Data ingestion components for pptx_templater.

This package loads fill payloads from JSON.
"""
from pptx_templater.ingest.json_loader import load_template_data

__all__ = [
    'load_template_data'
]
