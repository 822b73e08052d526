"""Bookings app package.

This app encapsulates the booking ledger: the booking model, unit
allocation, pricing and the booking lifecycle. Allocation runs inside a
database transaction with the room type row locked, so two requests can
never be given the same unit for overlapping nights.
"""
