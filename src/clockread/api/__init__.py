"""API module for clockread.

API layer:
- Checks request structure, reads/writes DB through the domain modules
- Returns JSON payloads for the experiment client
- Forbidden: trial generation, clock rendering, timing capture
"""
