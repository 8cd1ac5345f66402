"""MTX Verify - fail-closed container inspection."""
from .logic import verify_container

__all__ = ["verify_container"]
