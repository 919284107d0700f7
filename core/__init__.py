"""
Core module for shared domain infrastructure.

This module contains:
- Domain exceptions and value objects
- The expiring cache abstraction
- Middleware components
- Metrics and tracing setup
"""
