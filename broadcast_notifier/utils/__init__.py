"""
Utility functions module.

Time Semantics:
- Broadcast start times are UTC epoch seconds, 0 when unknown
- Wall-clock time is only used for choosing the poll interval
"""
