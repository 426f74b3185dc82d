"""
Warrant test suite.

This package contains tests for the Warrant library:
- Policy registry and resolution
- Authorization gate and actor context
- Resource, parent and relation resolution
- Resource loading and handler integration
- Persistence adapters (in-memory, SQLAlchemy)
"""
