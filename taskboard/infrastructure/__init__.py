"""Persistence, email delivery and scheduling adapters."""
