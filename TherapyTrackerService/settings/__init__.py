"""
Settings for the therapy tracker backend.

Pick one module through DJANGO_SETTINGS_MODULE:
- dev: local SQLite database, DEBUG on (manage.py default)
- test: in-memory SQLite and fast hashers, used by pytest
- prod: secrets required from the environment
All of them extend base.py.
"""
