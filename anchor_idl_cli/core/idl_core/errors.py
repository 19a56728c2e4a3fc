"""Custom exceptions for the IDL toolkit.

Every failure the CLI can report derives from :class:`IdlCliError`. The
``stage`` attribute names the step that failed so the command line can tell
the user where things went wrong.
"""

from __future__ import annotations


class IdlCliError(RuntimeError):
    """Base class for all toolkit failures."""

    stage = "idl"


class SourceNotFoundError(IdlCliError):
    """Raised when the program entry source file cannot be read."""

    stage = "extract"


class MacroNotFoundError(IdlCliError):
    """Raised when no line of the source starts with the declare macro."""

    stage = "extract"


class MalformedLiteralError(IdlCliError):
    """Raised when the declare macro line lacks a quoted literal."""

    stage = "extract"


class TemplateParseError(IdlCliError):
    """Raised when the template is not a JSON object."""

    stage = "template"


class MissingProgramNameError(IdlCliError):
    """Raised when the template has no string ``name`` field."""

    stage = "template"


class IdlValidationError(IdlCliError):
    stage = "validate"


class MissingAddressError(IdlValidationError):
    def __init__(self) -> None:
        super().__init__("IDL is missing program address")


class MissingNameError(IdlValidationError):
    def __init__(self) -> None:
        super().__init__("IDL is missing program name")


class MissingVersionError(IdlValidationError):
    def __init__(self) -> None:
        super().__init__("IDL is missing version")


class EmptyDiscriminatorError(IdlValidationError):
    """Raised for the first account, instruction or event with no discriminator."""

    def __init__(self, kind: str, name: str) -> None:
        super().__init__(f"{kind.capitalize()} '{name}' has an empty discriminator")
        self.kind = kind
        self.name = name


class IoFailureError(IdlCliError):
    stage = "io"


class EngineBuildError(IdlCliError):
    stage = "build"


class EngineConvertError(IdlCliError):
    stage = "convert"


class SerializationError(IdlCliError):
    stage = "serialize"


__all__ = [
    "IdlCliError",
    "SourceNotFoundError",
    "MacroNotFoundError",
    "MalformedLiteralError",
    "TemplateParseError",
    "MissingProgramNameError",
    "IdlValidationError",
    "MissingAddressError",
    "MissingNameError",
    "MissingVersionError",
    "EmptyDiscriminatorError",
    "IoFailureError",
    "EngineBuildError",
    "EngineConvertError",
    "SerializationError",
]
