# cosdata/logging_tags.py
"""
Subsystem tags prefixed to log messages.

Keeps log output greppable per subsystem. Changing a tag here
updates it everywhere.
"""

AUTH = "[AUTH]"
HTTP = "[HTTP]"
COLLECTION = "[COLLECTION]"
TRANSACTION = "[TRANSACTION]"
QUERY = "[QUERY]"
CLI = "[CLI]"
