"""WSGI entrypoint for serving the synchronisation API."""

from csv2po.app import create_app

# WSGI servers look for a module-level variable named ``application``.
application = create_app()
