"""
Core module shared by the license and product apps.

This module contains:
- Domain exceptions and value objects
- Settings-to-config adapters and client IP resolution
- Rate limiting and admin authentication middleware
- Audit log Celery tasks and Prometheus metrics
"""
