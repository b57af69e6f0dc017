"""
Custom exception hierarchy for the PHREEQC coupling core.

Every failure in a coupling step is fatal for that step. All exceptions
inherit from CouplingError so the surrounding simulation can catch any
chemistry failure with a single handler (typically to shrink the timestep).
"""
from typing import Any, Dict, Optional


class CouplingError(Exception):
    """Base exception for all PHREEQC coupling errors.

    Attributes:
        message: Human-readable error description
        details: Optional dictionary with additional context
        hint: Optional suggestion for resolution
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        hint: Optional[str] = None
    ):
        self.message = message
        self.details = details or {}
        self.hint = hint
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the full error message."""
        parts = [self.message]
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            parts.append(f"[{details_str}]")
        if self.hint:
            parts.append(f"Hint: {self.hint}")
        return " ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for structured logging."""
        result = {
            "error": self.__class__.__name__,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.hint:
            result["hint"] = self.hint
        return result


# =============================================================================
# PHREEQC-Related Exceptions
# =============================================================================

class PHREEQCError(CouplingError):
    """Base exception for PHREEQC engine errors."""
    pass


class PHREEQCNotFoundError(PHREEQCError):
    """PHREEQC executable not found or not accessible."""

    def __init__(
        self,
        path: Optional[str] = None,
        hint: str = "Set PHREEQC_EXE environment variable to the PHREEQC executable path"
    ):
        super().__init__(
            message="PHREEQC executable not found",
            details={"path": path} if path else None,
            hint=hint
        )


class DatabaseNotFoundError(PHREEQCError):
    """Thermodynamic database could not be loaded."""

    def __init__(
        self,
        database: Optional[str] = None,
        hint: str = "Set PHREEQC_DATABASE environment variable to the full path of the database file"
    ):
        super().__init__(
            message="Failed in loading the specified thermodynamic database file",
            details={"database": database} if database else None,
            hint=hint
        )


class PHREEQCExecutionError(PHREEQCError):
    """PHREEQC run returned a non-success status.

    Either the generated input is malformed or the chemistry did not
    converge. The engine's own diagnostic text is kept in ``diagnostics``.
    """

    def __init__(
        self,
        input_file: str,
        return_code: Optional[int] = None,
        diagnostics: str = "",
        hint: str = "Inspect the PHREEQC listing file or reduce the timestep"
    ):
        self.diagnostics = diagnostics
        details = {"input_file": input_file}
        if return_code is not None:
            details["return_code"] = return_code
        super().__init__(
            message="Failed in performing speciation calculation with the generated phreeqc input file",
            details=details,
            hint=hint
        )


class PHREEQCTimeoutError(PHREEQCError):
    """PHREEQC run exceeded the configured time limit."""

    def __init__(
        self,
        timeout_seconds: float,
        hint: str = "Increase PHREEQC_RUN_TIMEOUT_S or reduce the timestep"
    ):
        super().__init__(
            message=f"PHREEQC run timed out after {timeout_seconds} seconds",
            details={"timeout_seconds": timeout_seconds},
            hint=hint
        )


# =============================================================================
# File I/O Exceptions
# =============================================================================

class CouplingIOError(CouplingError):
    """Input script, result file or dump file could not be accessed."""

    def __init__(
        self,
        message: str,
        path: str,
        hint: Optional[str] = None
    ):
        self.path = path
        super().__init__(message=message, details={"path": path}, hint=hint)


# =============================================================================
# Result Parsing Exceptions
# =============================================================================

class ResultParseError(CouplingError):
    """Base exception for selected-output parsing errors.

    Parsing errors indicate drift between the generated input script and the
    output schema, never a recoverable data problem.
    """
    pass


class ParseError(ResultParseError):
    """A result token could not be converted to a floating-point value."""

    def __init__(self, value: str, system_id: int, column_index: int):
        self.value = value
        self.system_id = system_id
        self.column_index = column_index
        super().__init__(
            message=(
                f"Could not convert string '{value}' to double for chemical "
                f"system {system_id}, column {column_index}"
            ),
            details={
                "value": value,
                "system_id": system_id,
                "column_index": column_index,
            }
        )


class RowLengthMismatchError(ResultParseError):
    """A result row does not have the number of columns the schema expects."""

    def __init__(self, system_id: int, expected: int, actual: int):
        self.system_id = system_id
        super().__init__(
            message=(
                f"Result row of chemical system {system_id} has {actual} "
                f"columns, expected {expected}"
            ),
            details={"system_id": system_id, "expected": expected, "actual": actual},
            hint="The output schema and the SELECTED_OUTPUT block are out of sync"
        )


class MissingResultRowError(ResultParseError):
    """The result file ended before every chemical system was read."""

    def __init__(self, system_id: int):
        self.system_id = system_id
        super().__init__(
            message=(
                f"Error when reading calculation result of Solution {system_id} "
                f"after the reaction"
            ),
            details={"system_id": system_id}
        )


# =============================================================================
# Configuration-Related Exceptions
# =============================================================================

class ConfigurationError(CouplingError):
    """Base exception for configuration errors."""
    pass


class NotFoundError(ConfigurationError):
    """A named entity is absent from the configured collection.

    Raised when the output schema names a component, phase, reactant or
    secondary variable that was never configured.
    """

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(
            message=f"Could not find {kind} '{name}'.",
            details={"kind": kind, "name": name}
        )
