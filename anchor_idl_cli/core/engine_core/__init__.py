"""IDL engine: builds IDLs from source and converts legacy IDLs.

The rest of the toolkit only sees :class:`IdlEngine` and the
:class:`~anchor_idl_cli.core.idl_core.models.IdlDocument` it returns.
"""

from .base import AnchorIdlEngine, IdlEngine, get_engine

__all__ = ["AnchorIdlEngine", "IdlEngine", "get_engine"]
