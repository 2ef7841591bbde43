"""
qfstats
-------

Read-only statistics service for a local QuantFrame trade database.
"""

__version__ = "0.1.0"
