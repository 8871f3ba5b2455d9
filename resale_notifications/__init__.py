"""Multi-channel notification service for the ticket resale marketplace.

The package intentionally re-exports nothing; import the layer you need
(``domain``, ``application``, ``infrastructure`` or ``interfaces``).
"""
