"""kakeibo - household ledger with deferred settlement and balance reconciliation."""

__version__ = "0.1.0"


# The CLI pulls in the database layer, so load it only on demand
def __getattr__(name):
    if name == "main":
        from kakeibo.cli.main import main
        return main
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
