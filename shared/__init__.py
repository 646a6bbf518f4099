"""
Shared Kernel

This module contains base classes and utilities shared across all domain contexts:
domain events, value objects, the domain error hierarchy, the unit of work,
the in-process message bus and the REST envelope plumbing.
"""
