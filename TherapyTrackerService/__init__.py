"""
Therapy Tracker Service Django project.

License lifecycle and tenant provisioning backend.
"""
