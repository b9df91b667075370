"""
Standard exit codes for regcheck commands.

The pipeline contract is binary: 0 when every check passed (or there was
nothing to check), non-zero otherwise. There is no partial/warning code.
"""

# Standard POSIX exit codes
SUCCESS = 0              # All checks passed, or nothing to check
GENERAL_ERROR = 1        # At least one check failed, or a policy violation
USAGE_ERROR = 2          # Misuse of shell command (wrong arguments, etc.)
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)

# Exit code mappings for common exceptions
EXCEPTION_EXIT_CODES = {
    'FileNotFoundError': GENERAL_ERROR,
    'ValueError': GENERAL_ERROR,
    'JSONDecodeError': GENERAL_ERROR,
    'ConfigError': USAGE_ERROR,
    'KeyboardInterrupt': INTERRUPTED,
}


def get_exit_code_for_exception(exc: Exception) -> int:
    """
    Get the appropriate exit code for an exception.

    Args:
        exc: The exception that occurred

    Returns:
        Appropriate exit code
    """
    exc_name = exc.__class__.__name__
    return EXCEPTION_EXIT_CODES.get(exc_name, GENERAL_ERROR)


class CommandError(Exception):
    """
    Exception that commands can raise to indicate specific exit codes.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class ValidationFailedError(CommandError):
    """Raised when one or more checks failed."""
    def __init__(self, message: str = "Validation FAILED", failed: int = 0):
        super().__init__(message, GENERAL_ERROR)
        self.failed = failed


class ConfigError(CommandError):
    """Raised when there's a configuration error."""
    def __init__(self, message: str):
        super().__init__(message, USAGE_ERROR)
