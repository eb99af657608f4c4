"""API module for the rehab portal.

- Authenticates callers against the backend
- Returns table and chart payloads for the UI
- Forbidden: rendering, persistence, statistics logic beyond calling aggregation
"""
