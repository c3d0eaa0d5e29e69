"""Failure kinds raised at the analysis service boundary.

All of them reach the user as the same static message; the distinction only
matters for the diagnostic log.
"""

USER_FACING_ERROR = "诊断系统暂时不可用，请稍后重试。"


class AnalysisError(Exception):
    """Base class for analysis service failures."""


class EmptyResponseError(AnalysisError):
    """The service answered without any text payload."""


class MalformedResponseError(AnalysisError):
    """The text payload is not JSON or does not match the report shape."""


class ServiceUnavailableError(AnalysisError):
    """Transport failure: timeout, network error, non-success status or missing credential."""


class InvalidTransitionError(Exception):
    """A phase change that the session state machine does not allow."""

    def __init__(self, current, target):
        super().__init__(f"Cannot move from {current.value} to {target.value}")
        self.current = current
        self.target = target
