"""Utility functions for MaxEntForge.

This module provides common utilities used across MaxEntForge:

- Interval operations (closed-interval overlap)
- Sequence manipulation
- Logging configuration

Example:
    >>> from maxentforge.utils import intervals, sequences
    >>> sequences.reverse_complement("CAGGTAAGT")
    'ACTTACCTG'
"""
