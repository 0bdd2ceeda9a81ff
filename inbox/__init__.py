"""
Message Inbox

Paginated message inbox with a cache-aside retrieval layer backed by Redis.
"""

__version__ = "0.1.0"
