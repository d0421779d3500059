"""Data ingestion pipeline.

This package reads raw provider datasets and drives them through
transformation, enrichment, validation, linking, and output writes.
"""
