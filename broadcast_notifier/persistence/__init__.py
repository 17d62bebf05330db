"""
Persistence of tracked broadcast state between restarts.
"""
