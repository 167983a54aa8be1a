"""WSGI entry point (``gunicorn -c gunicorn.conf.py``, ``flask --app blogapi.wsgi``)."""

from blogapi.factory import create_app

app = create_app()
