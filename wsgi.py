"""WSGI entrypoint for Gunicorn.

The game session lives in process memory, so run a single worker:
  gunicorn -w 1 --threads 4 -b 0.0.0.0:8000 wsgi:app
"""

from bicho import create_app

app = create_app()
