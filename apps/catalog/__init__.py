"""Catalog app package.

Rentable products with their pricing tiers and the inventory counters the
booking engine reserves against. Counters only move through
``apps.catalog.inventory``.
"""
