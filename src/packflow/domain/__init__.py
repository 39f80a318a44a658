"""Domain layer for packflow application.

Services are imported from their own modules (packflow.domain.payment,
packflow.domain.metrics, ...); the database layer imports entities from
this package, so nothing that depends on it is imported here.
"""
