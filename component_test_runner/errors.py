"""Errors that abort a whole orchestration run."""


class HarnessError(Exception):
    """Base class for errors that prevent tests from running at all."""


class ConfigurationError(HarnessError):
    """Raised when the registry, policy or configuration file is invalid."""


class InvocationError(HarnessError):
    """Raised when the test runner cannot be located in the environment."""
