"""IDL document model, checks and console renderers."""

from .account_tree import render_accounts
from .errors import IdlCliError
from .models import IdlDocument
from .program_id import extract_program_id, read_program_id
from .reporter import render_instructions
from .template_patcher import extract_and_patch
from .type_formatter import format_type
from .validator import IdlSummary, validate_idl

__all__ = [
    "IdlCliError",
    "IdlDocument",
    "IdlSummary",
    "extract_and_patch",
    "extract_program_id",
    "format_type",
    "read_program_id",
    "render_accounts",
    "render_instructions",
    "validate_idl",
]
