"""
Test suite for the task-list service.

This package contains:
- unit/: token service, auth gate, access control, models and config
- integration/: HTTP tests through the Flask test client
- security/: revocation, expiry, tampering and tenant-isolation properties
"""
