"""Payments app package.

Payment ledger for bookings: payment intents, confirmation and refunds.
A payment moves the booking's ``payment_status`` only; booking status and
inventory are owned by the booking engine.
"""
