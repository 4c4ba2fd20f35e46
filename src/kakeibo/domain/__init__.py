"""Domain layer for kakeibo application.

Services are imported from their modules directly (e.g.
``kakeibo.domain.reconciliation``) so that the database layer can depend on
``kakeibo.domain.entities`` without an import cycle.
"""
