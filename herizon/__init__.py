"""Herizon cycle-tracking API."""
