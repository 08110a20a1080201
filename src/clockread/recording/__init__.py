"""Recording module for experiment submissions.

- Writes one experiment and its trials per submission, atomically
- Forbidden: recomputing client-supplied summary metrics
"""
