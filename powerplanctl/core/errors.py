"""Domain-specific errors for powerplanctl."""


class PowerPlanError(Exception):
    """Base error for powerplanctl."""


class ConfigValidationError(PowerPlanError):
    """Raised when the configuration file does not conform to schema or semantics."""


class ConfigLoadError(PowerPlanError):
    """Raised when reading the configuration file fails."""


class NotFoundError(PowerPlanError):
    """Raised when a name query matched no plan, subgroup, or setting."""

    def __init__(self, query: str | None, message: str | None = None) -> None:
        self.query = query
        super().__init__(message or f"No match found for '{query}'")


class AmbiguousMatchError(PowerPlanError):
    """Raised when a name query matched more than one candidate."""

    def __init__(self, query: str, match_count: int, names: tuple[str, ...] = ()) -> None:
        self.query = query
        self.match_count = match_count
        self.names = names
        detail = f": {', '.join(names)}" if names else ""
        super().__init__(
            f"'{query}' matched {match_count} candidates{detail}. Use a more specific name."
        )


class ValidationError(PowerPlanError):
    """Raised when a request is rejected before any command runs."""


class ExecutionFailure(PowerPlanError):
    """Raised when a command could not run or exited with an error status."""


class ExecutorConnectError(ExecutionFailure):
    """Raised when a remote host cannot be reached."""


class ExecutorTimeoutError(ExecutionFailure):
    """Raised when a command does not complete in time."""
