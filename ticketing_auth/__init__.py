"""Ticketing auth service: account registration and credential checks."""
