"""Exception hierarchy for the Cosmos adapter SDK."""

from typing import Any, Optional


class CosmosError(Exception):
    """Base class for every error raised by this package."""


class InvalidAmount(CosmosError, ValueError):
    """Amount or coin string could not be parsed."""


class InvalidAddress(CosmosError, ValueError):
    """Address failed bech32 decoding or prefix checks."""


class InvalidQuery(CosmosError, ValueError):
    """Event subscription query is not well formed."""


class ConfigurationError(CosmosError, ValueError):
    """Credentials or network profile rejected at construction."""


class InvalidChannel(CosmosError, ValueError):
    """Channel identifier is not of the form channel-<number>."""


class MissingParameter(CosmosError, ValueError):
    """A required operation parameter was not supplied."""

    def __init__(self, name: str):
        super().__init__(f"Missing required parameter: {name}")
        self.name = name


class UnknownDestination(CosmosError, LookupError):
    """Cross-chain destination is absent from the route table."""

    def __init__(self, destination: str):
        super().__init__(f"Unknown destination chain: {destination}")
        self.destination = destination


class UnknownOperation(CosmosError, LookupError):
    """Resource/operation pair has no handler."""

    def __init__(self, resource: str, operation: Optional[str] = None):
        if operation is None:
            message = f"Unknown resource: {resource}"
        else:
            message = f"Unknown operation '{operation}' for resource '{resource}'"
        super().__init__(message)
        self.resource = resource
        self.operation = operation


class ProtocolError(CosmosError):
    """Server responded in a way that breaks the protocol contract."""


class TransportError(CosmosError):
    """Network-level failure talking to a chain endpoint."""


class RequestTimeout(TransportError):
    """Request did not complete within the configured timeout."""


class RemoteQueryError(TransportError):
    """Non-success response from the REST query gateway."""

    def __init__(self, message: str, status: Optional[int] = None, path: str = ""):
        if status is not None:
            text = f"Query {path} failed with HTTP {status}: {message}"
        else:
            text = f"Query {path} failed: {message}"
        super().__init__(text)
        self.status = status
        self.message = message
        self.path = path


class RemoteRpcError(TransportError):
    """JSON-RPC call returned an error object or failed in transit."""

    def __init__(
        self,
        message: str,
        code: Optional[int] = None,
        data: Any = None,
        method: str = "",
    ):
        super().__init__(f"RPC {method} error: {message}" if method else f"RPC error: {message}")
        self.message = message
        self.code = code
        self.data = data
        self.method = method


class BroadcastTimeout(TransportError):
    """Broadcast transaction was not found in a block before the deadline."""

    def __init__(self, tx_hash: str, timeout: float):
        super().__init__(
            f"Transaction {tx_hash} was submitted but not included in a block "
            f"within {timeout:g}s"
        )
        self.tx_hash = tx_hash
        self.timeout = timeout
