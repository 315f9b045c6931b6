"""snapshot/ -- JSON snapshot loading for Glyph DB.

Layer rule: snapshot/ may import from core/ (domain dataclasses, config).
core/ does NOT import from snapshot/; main.py wires the two together.
"""
