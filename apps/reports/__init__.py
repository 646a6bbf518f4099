"""Reports app package: admin dashboard statistics."""
