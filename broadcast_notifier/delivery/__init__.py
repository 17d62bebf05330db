"""
Notification channel transports and dispatching.
"""
