"""Error taxonomy for the results pipeline and Xray integration."""


class XrayBridgeError(Exception):
    """Base class for all errors raised by xray_bridge."""


class MissingInputError(XrayBridgeError, FileNotFoundError):
    """Raised when a required input file does not exist."""


class ParseError(XrayBridgeError, ValueError):
    """Raised when an input file cannot be decoded into the expected structure."""


class WriteError(XrayBridgeError, OSError):
    """Raised when the generated payload cannot be persisted."""


class XrayConfigError(XrayBridgeError):
    """Raised when Xray credentials or endpoints are not configured."""


class XrayApiError(XrayBridgeError):
    """Raised when the Xray API answers with a non-success status."""

    def __init__(self, status: int, body: str) -> None:
        super().__init__(f"Xray API request failed: {status} {body}")
        self.status = status
        self.body = body

    @property
    def retryable(self) -> bool:
        """Whether the failure is transient (throttling or server side)."""
        return self.status == 429 or self.status >= 500


class GitError(XrayBridgeError, RuntimeError):
    """Raised when a git command fails or a ref cannot be resolved."""
