"""Transaction signers.

A :class:`Wallet` pairs a local signing account with the provider used to
broadcast its transactions. As with providers, a shared wallet built from the
environment private key serves most requests.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_keys.exceptions import ValidationError as KeyValidationError
from web3 import Web3
from web3.exceptions import TimeExhausted

from learninggrowth.core.config import load_blockchain_environment, settings

from .errors import (
    InvalidPrivateKeyError,
    InvalidTransactionError,
    SignerUnavailableError,
    TransactionRevertedError,
)
from .provider_factory import ChainProvider, get_shared_provider

_LOGGER = logging.getLogger(__name__)

_cached_wallet: Optional["Wallet"] = None


@dataclass(frozen=True)
class SentTransaction:
    tx_hash: str
    receipt: Any


class Wallet:
    """
    A local signer, optionally connected to a provider.

    Args:
        account: The signing account.
        provider: Provider used to build and broadcast transactions.
    """

    def __init__(self, account: LocalAccount, provider: Optional[ChainProvider] = None) -> None:
        self.account = account
        self.provider = provider

    @classmethod
    def from_key(cls, private_key: str, provider: Optional[ChainProvider] = None) -> "Wallet":
        try:
            account = Account.from_key(private_key)
        except (ValueError, TypeError, KeyValidationError) as exc:
            raise InvalidPrivateKeyError() from exc
        return cls(account, provider)

    @property
    def address(self) -> str:
        return self.account.address

    def connect(self, provider: ChainProvider) -> "Wallet":
        """Return a wallet for the same account bound to ``provider``."""
        return Wallet(self.account, provider)

    async def send_transaction(self, contract_call: Any) -> SentTransaction:
        """
        Build, sign and broadcast a prepared contract function call.

        Waits for the receipt before returning.

        Args:
            contract_call: A bound web3 contract function (``contract.functions.x(*args)``).

        Returns:
            The transaction hash and its receipt.

        Raises:
            SignerUnavailableError: If the wallet is not connected to a provider.
            InvalidTransactionError: If no receipt arrives in time.
            TransactionRevertedError: If the transaction was mined but reverted.
        """
        if self.provider is None:
            raise SignerUnavailableError("The wallet is not connected to a provider.")

        w3 = self.provider.web3
        tx = await contract_call.build_transaction(
            {
                "from": self.address,
                "nonce": await w3.eth.get_transaction_count(self.address, "pending"),
                "chainId": await self.provider.get_chain_id(),
            }
        )
        signed = self.account.sign_transaction(tx)
        raw_hash = await w3.eth.send_raw_transaction(signed.raw_transaction)
        tx_hash = Web3.to_hex(raw_hash)
        _LOGGER.info("Transaction %s sent from %s", tx_hash, self.address)

        try:
            receipt = await w3.eth.wait_for_transaction_receipt(raw_hash, timeout=settings.receipt_timeout)
        except TimeExhausted as exc:
            raise InvalidTransactionError(f"No receipt received for transaction {tx_hash}.") from exc

        if receipt is None:
            raise InvalidTransactionError(f"No receipt received for transaction {tx_hash}.")
        if receipt.get("status") == 0:
            raise TransactionRevertedError(tx_hash)

        return SentTransaction(tx_hash=tx_hash, receipt=receipt)

    def __repr__(self) -> str:
        return f"Wallet(address={self.address!r}, provider={self.provider!r})"


def _resolve_private_key(custom_key: Optional[str] = None) -> str:
    if custom_key:
        return custom_key

    config = load_blockchain_environment()
    if not config.private_key:
        raise SignerUnavailableError(
            "No private key found. Set BLOCKCHAIN_PRIVATE_KEY to allow transactions."
        )
    return config.private_key


def create_wallet(
    private_key: Optional[str] = None,
    use_shared_provider: bool = True,
    provider: Optional[ChainProvider] = None,
) -> Wallet:
    """
    Build a wallet, reusing the shared one when called with defaults.

    Args:
        private_key: Signing key; defaults to the environment key.
        use_shared_provider: Connect to the shared provider when ``provider`` is not given.
        provider: Explicit provider to connect to.

    Raises:
        SignerUnavailableError: If no private key is available.
        InvalidPrivateKeyError: If the key is malformed.
    """
    global _cached_wallet

    is_default = not private_key and use_shared_provider and provider is None
    if _cached_wallet is not None and is_default:
        return _cached_wallet

    resolved_key = _resolve_private_key(private_key)
    resolved_provider = provider if provider is not None else (get_shared_provider() if use_shared_provider else None)
    wallet = Wallet.from_key(resolved_key, resolved_provider)
    if is_default:
        _cached_wallet = wallet
    return wallet


def get_shared_wallet() -> Wallet:
    """Return the process-wide wallet built from the environment key."""
    global _cached_wallet

    if _cached_wallet is None:
        _cached_wallet = create_wallet()
    return _cached_wallet


def reset_wallet_factory() -> None:
    global _cached_wallet

    _cached_wallet = None
