"""
Adapters for the flight network: data providers and the in-memory store.
"""
