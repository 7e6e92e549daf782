"""
HSA Receipt Analyzer - Source Package

Reads a directory of receipt files whose names encode each expense and
turns them into per-year and per-category HSA expense summaries.

DESIGN PRINCIPLES:
1. The filename is the record; nothing else is read
2. Fail early, fail visibly: a bad filename is reported, never guessed
3. No silent corrections to amounts or dates
4. Totals reconcile to the cent
"""

__version__ = "1.0.0"
__author__ = "HSA Analyzer Team"
