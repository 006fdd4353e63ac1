"""Helpers for self-hosted CI runners: schedules, labels, hashing, logging,
rate limits, a fake runners API and release signing."""

__version__ = "0.1.0"