"""
Availability, allocation and pricing rules for bookings.

The modules here work on plain attributes (room type limits, unit status,
date ranges) and never touch the database; apps.bookings.services loads
the records, takes the locks and persists the outcome.
"""
