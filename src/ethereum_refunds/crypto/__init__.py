"""
Cryptographic primitives used by the ledger.
"""
