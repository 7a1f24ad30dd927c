"""Domain layer for orbis application.

Services are imported from their modules directly; this package stays
import-free so the database layer can load entities without a cycle.
"""
