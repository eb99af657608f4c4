"""Backend API access.

- Typed calls to the sensor backend's REST API
- Forbidden: aggregation, view shaping
"""
