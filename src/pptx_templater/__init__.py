# src/pptx_templater/__init__.py
"""
pptx_templater - Fill PowerPoint templates.

Replaces {{tags}} in slides, swaps tagged pictures and spreads table rows
over as many copies of a slide as needed.
"""

__version__ = "0.1.0"
