"""Nudge: adaptive check-in notifications over Web Push."""
