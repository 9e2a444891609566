"""Web Push transport."""
