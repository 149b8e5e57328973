"""Activity app package.

Staff-facing feed of what happened in the booking ledger, written by
domain event subscribers after each transaction commits.
"""
