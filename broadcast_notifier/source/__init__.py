"""
Broadcast sources polled for lifecycle status.
"""
