"""Geofenced attendance core.

Feature modules (zones, geofence, attendance, tasks) each carry a domain
model, a repository port, a MySQL adapter, a service and a thin Flask
controller.
"""
