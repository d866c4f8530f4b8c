"""
Twoogle - Small Messaging Board

A single-process messaging board with tagged, private and reply messages,
user subscriptions and filtered feeds, backed by SQLite.
"""

__version__ = "0.1.0"
__author__ = "Twoogle Project"
