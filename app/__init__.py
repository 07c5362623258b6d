"""Doorlist: event invitations, QR invitation cards and door check-in."""
