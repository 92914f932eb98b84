"""Outbound adapters (payment gateway, carrier, notifications)."""
