"""The two operations the toolkit needs from an IDL engine."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Protocol, Union

from ...config import IdlCliConfig
from ..idl_core.models import IdlDocument
from .cargo_build import build_idl
from .legacy import convert_idl


class IdlEngine(Protocol):
    def build(
        self,
        program_root: Union[str, Path],
        resolution: bool,
        skip_lint: bool,
        no_docs: bool,
    ) -> IdlDocument: ...

    def convert(self, raw: bytes) -> IdlDocument: ...


class AnchorIdlEngine:
    """Default engine: ``cargo test`` for builds, in-process legacy conversion."""

    def __init__(self, config: Optional[IdlCliConfig] = None) -> None:
        self.config = config

    def build(
        self,
        program_root: Union[str, Path],
        resolution: bool = True,
        skip_lint: bool = False,
        no_docs: bool = False,
    ) -> IdlDocument:
        return build_idl(program_root, resolution, skip_lint, no_docs, config=self.config)

    def convert(self, raw: bytes) -> IdlDocument:
        return convert_idl(raw)


def get_engine(config: Optional[IdlCliConfig] = None) -> IdlEngine:
    return AnchorIdlEngine(config)
