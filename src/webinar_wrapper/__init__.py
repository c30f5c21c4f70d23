"""
Webinar Wrapper: batch webinar scheduling and notification service.
"""

__version__ = "0.1.0"
