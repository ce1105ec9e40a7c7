# querybar/collector/__init__.py - Query collection module
"""
Collector module for gathering the queries executed during a request.

This module provides:
- events.py: Query, connection and timeline value types
- base.py: Toolbar collector contract
- database.py: Database tab collector
- registry.py: Database connection registry
- request_scope.py: Per-request collection scope
"""
