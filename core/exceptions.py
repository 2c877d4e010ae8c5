"""Delegate Exception Hierarchy

Defines exceptions for delegate-level failures with clear classification:
- ProviderUnavailableError: Infrastructure failures of a remote resolver
- InstructionError: Malformed or already-consumed instructions
- Other exceptions: Raised by instruction actions themselves (propagate normally)
"""


class ProviderUnavailableError(RuntimeError):
    """Raised when a CAPTCHA resolver provider is unreachable or unavailable.

    This is an INFRASTRUCTURE failure, not a SEMANTIC failure.

    THROW when:
    - Connection refused
    - Provider unreachable
    - Service unavailable (5xx)
    - Request timeout

    DO NOT throw for:
    - Provider rejected the request (raise RuntimeError)
    - Page has no CAPTCHA to solve (return empty result)
    """

    def __init__(self, provider: str, message: str):
        super().__init__(message)
        self.provider = provider

    def __str__(self):
        return f"[{self.provider}] {super().__str__()}"


class InstructionError(ValueError):
    """Raised when an instruction cannot be executed as described.

    Examples: unknown instruction type, missing member name, no resource
    to run against, or an instruction executed twice.
    """
