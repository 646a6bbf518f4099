"""Bookings app package.

The booking engine: validation and pricing of new bookings, the booking
state machine and the inventory reservations that follow it. Every status
change goes through the transition methods on ``Booking``; inventory
counters are moved only through ``apps.catalog.inventory``.
"""
