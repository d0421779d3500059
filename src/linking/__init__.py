"""Cross-dataset linking layer.

This package attaches references between records of different categories.
Links are stored as record ids and never copy the referenced payloads.
"""
