"""Error types for the chain client package.

Defines a small hierarchy of exceptions raised while resolving connections,
coercing ABI arguments and executing contract calls. Subclasses of
:class:`ChainValidationError` describe bad caller input; everything else is a
configuration or runtime failure.
"""

from __future__ import annotations

from typing import Any, Optional


class ChainClientError(Exception):
    """Base error for all chain client exceptions."""


class ChainValidationError(ChainClientError):
    """Raised when a caller-supplied value cannot be used for a contract call."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class ValueCoercionError(ChainValidationError):
    """Raised when a value cannot be converted to an ABI integer."""

    def __init__(self, field: str, value: Any, reason: str) -> None:
        super().__init__(f"The field {field} {reason}.", field=field)
        self.value = value


class InvalidAddressError(ChainValidationError):
    """Raised for values that are not valid account or contract addresses."""

    def __init__(self, address: Any, field: Optional[str] = None) -> None:
        super().__init__(f"The address {address} is not valid.", field=field)
        self.address = address


class InvalidPrivateKeyError(ChainValidationError):
    """Raised when a private key cannot be turned into a signing account."""

    def __init__(self) -> None:
        super().__init__("The provided private key is not valid.", field="privateKey")


class ConfigurationError(ChainClientError):
    """Raised when required connection or contract settings are missing."""


class SignerUnavailableError(ChainClientError):
    """Raised when a write is attempted without any usable signer."""


class ContractMethodNotFoundError(ChainClientError):
    def __init__(self, method: str) -> None:
        super().__init__(f"The function {method} does not exist on the contract.")
        self.method = method


class InvalidTransactionError(ChainClientError):
    """Raised when a write call does not yield a transaction receipt."""


class TransactionRevertedError(ChainClientError):
    def __init__(self, tx_hash: str) -> None:
        super().__init__(f"Transaction {tx_hash} was reverted.")
        self.tx_hash = tx_hash


class ContractResponseError(ChainClientError):
    """Raised when a contract returns data in an unexpected shape."""


class ContractNotRegisteredError(ChainClientError):
    def __init__(self, name: str) -> None:
        super().__init__(f"No contract is registered under the name {name}.")


class ContractAlreadyRegisteredError(ChainClientError):
    def __init__(self, name: str) -> None:
        super().__init__(f"A contract is already registered under the name {name}.")
