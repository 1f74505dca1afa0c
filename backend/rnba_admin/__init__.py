"""
RNBA Admin data layer

Local caching and backend access for the event registration / check-in
admin tool.
"""

__version__ = "1.0.0"
