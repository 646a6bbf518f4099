"""REST plumbing shared by every app: response envelope, pagination, errors."""
