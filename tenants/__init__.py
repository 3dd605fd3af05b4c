"""
Tenants module - institutions and their professional users.

This module handles:
- Tenant (residence/institution) registration through license redemption
- Effective user limit resolution
- Professional user management and authentication
"""
