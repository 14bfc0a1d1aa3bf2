"""Hotels app package.

Catalog of hotels and their bookable resources (rooms and event halls).
The catalog is edited through the Django admin; the booking engine only
reads it.
"""
