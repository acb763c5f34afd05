"""Batch write layer.

This package writes seed batches to the target table with retries
and recycles request containers between writes.
"""
