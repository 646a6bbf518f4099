"""Notifications app package.

In-app notifications for customers, created from booking and payment
events after their transaction commits, plus an optional email copy.
"""
