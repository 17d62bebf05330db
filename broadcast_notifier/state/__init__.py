"""
Broadcast lifecycle state module.

Decides which notifications a lifecycle status change fires and tracks
the next anticipated broadcast start across poll cycles.
"""
