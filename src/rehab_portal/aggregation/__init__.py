"""Aggregation module for session data.

- Turns materialized session records and backend analytics into
  table and chart payloads
- Forbidden: HTTP calls, rendering, persistence
"""
