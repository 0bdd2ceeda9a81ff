"""Inbox message domain."""
