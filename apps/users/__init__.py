"""Users app package.

Identity for the rental platform: a custom user model logging in by email
with a ``customer`` or ``admin`` role, JWT issuance and the profile and
customer-management endpoints. Use ``apps.users.models.CustomUser`` as the
AUTH_USER_MODEL throughout the project.
"""
