"""Seed ingestion pipeline.

This package streams seed files, decodes binary markers, and groups
records into bounded batches for the store layer.
"""
