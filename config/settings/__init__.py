"""
Settings package for contact_monitor.

`config.settings` resolves to the development settings. Deployments point
DJANGO_SETTINGS_MODULE at config.settings.production, and pytest uses
config.settings.test.
"""

from .development import *
