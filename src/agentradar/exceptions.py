"""AgentRadar exception hierarchy.

Probe errors stay inside the providers: ``DiscoveryEngine.scan()`` turns
every degraded probe into a ``DiscoveryIssue`` instead of raising. Only
configuration problems and a facade that ran out of retries reach the
caller, both as subclasses of ``AgentRadarError``.
"""


class AgentRadarError(Exception):
    """Base exception for all AgentRadar errors."""


class ProbeError(AgentRadarError):
    """Raised when a single host probe cannot produce a result."""


class ProbeTimeoutError(ProbeError):
    """Raised when a probe exceeds its time budget.

    Covers process-table enumeration and binary version probes that run
    past ``process_timeout_ms``.
    """


class ProbeExecutionError(ProbeError):
    """Raised when a probe fails to execute.

    Covers permission denials from the OS and platform APIs that are
    unavailable on the current host.
    """


class ConfigurationError(AgentRadarError):
    """Raised for invalid discovery configuration values."""


class DiscoveryError(AgentRadarError):
    """Raised when a full discovery run fails after all retries."""
