"""Unified dataset storage layer.

This package writes category outputs as quarter partitions and chunk files.
It also reads them back for the SDK, analysis, and cross-dataset linking.
"""
