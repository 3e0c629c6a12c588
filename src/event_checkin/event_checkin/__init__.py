"""Event Check-in package.

Feature modules (roster, checkins, events, ledger, reports, notifications, ...)
sit behind a thin Flask controller layer and in-memory service layers.
"""
