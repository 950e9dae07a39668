"""
Licenses module - key issuing and validation.

This module handles:
- Key generation from charset specifications
- License entity, restrictions and lifecycle (revoke, purge, expire)
- The check pipeline with auto-allowed IP admission
- Signed offline tokens and the audit trail
"""
