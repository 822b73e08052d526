"""Payments app package.

Wraps the Paystack API: opening a checkout when a booking is made,
verifying payments by booking reference, processing signed webhooks and
refunding paid bookings.
"""
