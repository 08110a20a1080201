"""Aggregation module for experiment statistics.

- Reads DB and produces cross-experiment averages
- Forbidden: writes of any kind
"""
