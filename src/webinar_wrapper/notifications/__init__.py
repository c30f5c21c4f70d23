"""
Notification channels.
"""

__all__ = [
    "interface",
    "rendering",
    "templates",
    "email_channel",
    "messaging_channel",
]
