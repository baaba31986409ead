"""Notifications: best-effort buyer emails."""
