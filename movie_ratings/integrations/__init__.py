"""
Clients for third-party data providers.
"""
