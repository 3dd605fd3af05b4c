"""
Licenses module - License key lifecycle.

This module handles:
- License entity and domain logic
- License key generation and digesting
- Lazy expiry, validation and revocation
"""
