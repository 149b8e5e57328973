"""Availability app package.

Per-day open/closed exceptions for structures and the resolver that turns
policy, overrides and bookings into one status per slot.
"""
