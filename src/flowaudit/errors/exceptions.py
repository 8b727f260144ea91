"""Custom exception classes for flowaudit."""


class FlowAuditError(Exception):
    """Base exception for flowaudit."""

    def __init__(self, code: str, message: str, details=None):
        self.code = code
        self.message = message
        self.details = details
        super().__init__(message)


class GraphLoadError(FlowAuditError):
    """Workflow document could not be parsed into a graph."""

    def __init__(self, message: str, details=None):
        super().__init__("GRAPH_LOAD_ERROR", message, details)


class ParameterDepthError(FlowAuditError):
    """Parameter tree nests deeper than the configured limit."""

    def __init__(self, path: str, max_depth: int):
        super().__init__(
            "PARAMETER_DEPTH_EXCEEDED",
            f"Parameter tree exceeds depth {max_depth} at '{path or '<root>'}'",
            details={"path": path, "max_depth": max_depth},
        )


class CheckExecutionError(FlowAuditError):
    """A security check raised instead of returning findings."""

    def __init__(self, check_name: str, cause: Exception):
        super().__init__(
            "CHECK_FAILED",
            f"Check '{check_name}' failed: {cause}",
            details={"check": check_name, "error_type": type(cause).__name__},
        )
        self.check_name = check_name
