"""WSGI entrypoint of the rental platform.

Used by ``runserver`` and by production WSGI servers (gunicorn, uwsgi).
Production deployments set ``DJANGO_SETTINGS_MODULE=config.settings.prod``.
"""

import os
from django.core.wsgi import get_wsgi_application  # type: ignore

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.dev')

application = get_wsgi_application()
