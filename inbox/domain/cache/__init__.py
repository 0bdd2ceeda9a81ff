"""
Cache Domain Module

Cache key derivation, TTL values and the ports of the cache-aside layer.
"""
