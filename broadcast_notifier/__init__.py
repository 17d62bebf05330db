"""
Broadcast Notifier - Live Broadcast Lifecycle Notification Service

Polls a live-video broadcast source on an adaptive interval, detects
lifecycle transitions of each broadcast and posts at most one notification
per meaningful transition to a webhook channel. Tracked state is persisted
so restarts neither repeat notifications nor lose the next scheduled event.
"""

__version__ = "0.1.0"
__author__ = "Broadcast Notifier Team"
