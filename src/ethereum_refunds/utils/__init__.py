"""
Utility functions used by the ledger.
"""
