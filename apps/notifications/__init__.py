"""Notifications app package.

Outbound notices for reservation events. Delivery runs in Celery tasks;
failures are recorded as incidents on the reservation and never change
the outcome of the operation that triggered them.
"""
