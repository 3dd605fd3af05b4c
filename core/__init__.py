"""
Core module for shared domain infrastructure.

This module contains:
- Domain events, exceptions and value objects
- The in-memory event bus and its handlers
- Middleware components and Prometheus metrics
"""
