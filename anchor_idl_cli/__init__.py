"""Anchor IDL toolkit.

Inspect, patch, validate, convert and build Anchor IDL documents.

Run the CLI with ``python -m anchor_idl_cli`` or the ``anchor-idl`` script.
"""

__version__ = "0.1.7"

__all__ = ["config", "core", "console"]
