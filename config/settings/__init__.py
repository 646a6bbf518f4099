"""Settings package for the rental platform.

The `base.py` module contains configuration shared across environments.
`dev.py`, `prod.py` and `test.py` extend it with environment specific
overrides.
"""
