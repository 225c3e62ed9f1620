"""Datastore adapter: fetches invoices and clients for the analytics engine."""
