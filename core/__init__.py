"""core/ -- Search, correlation, aggregation and rendering kernel for Glyph DB.

Layer rule: core/ imports only stdlib + third-party libraries.
It does NOT import from snapshot/ or main.py.
"""
