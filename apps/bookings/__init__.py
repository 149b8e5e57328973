"""Bookings app package.

The booking ledger: guest requests, staff approvals, single and bulk
blocks. Every write runs in one transaction that locks the structure row
before checking slot exclusivity; partial unique constraints on the
bookings table catch anything that slips through.
"""
