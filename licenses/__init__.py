"""
Licenses module - Plugin license activation management.

This module handles:
- License id storage per plugin and environment
- Activation and deactivation against the licensing service
- Cached license validity checks
"""
