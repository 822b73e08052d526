"""Rooms app package.

Holds the room catalog: room types with their seasonal pricing and
blackout windows, and the physical room units that bookings are
allocated to. Unit occupancy is never stored here; it is derived from
the booking ledger.
"""
