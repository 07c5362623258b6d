"""Application constants.

This module contains magic strings and numbers used throughout the application.
Centralizing these values makes them easier to maintain and modify.
"""

# Invite labels
# Shown when an invite has neither a linked contact nor a stored name
GENERAL_INVITE_LABEL = "General Invite"

# Blank invite batches
MAX_BLANK_INVITES = 100
MAX_CHECKINS_LIMIT = 100

# QR Code Placement
# Defaults for events and templates, all normalized to the background image
DEFAULT_QR_POSITION_X = 0.5
DEFAULT_QR_POSITION_Y = 0.5
DEFAULT_QR_SIZE = 0.3  # Edge length as a fraction of min(width, height)

# QR Code Rendering
# QR bitmaps are generated oversized and scaled down onto the card
QR_RENDER_SIZE = 1024
QR_BORDER_MODULES = 4

# JWT Token Configuration
# Token expiration time in minutes (12 hours, long enough for a door shift)
ACCESS_TOKEN_EXPIRE_MINUTES = 720
