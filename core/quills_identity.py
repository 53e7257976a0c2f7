#!/usr/bin/env python3
"""Wallet identity helpers for the Quills chat daemon.

The wallet is only used to prove key ownership to the chat API:
- load the private key once and derive the public address
- sign the server nonce with personal-message signing (EIP-191,
  the same format wallets use for `signMessage`)

No on-chain call is made. `rpc_url` is kept on the identity so the wallet
configuration stays in one place.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from eth_account import Account
from eth_account.messages import encode_defunct


class IdentityError(ValueError):
    """Raised when the private key cannot be turned into a wallet."""


@dataclass(frozen=True)
class Identity:
    address: str
    private_key: str = field(repr=False)
    rpc_url: Optional[str] = None


def load_identity(private_key: str, rpc_url: Optional[str] = None) -> Identity:
    """Build an Identity from a hex private key (with or without 0x)."""

    pk = (private_key or "").strip()
    if not pk:
        raise IdentityError("Private key is empty")

    try:
        account = Account.from_key(pk)
    except Exception as e:
        # eth_keys raises its own ValidationError for bad lengths.
        raise IdentityError(f"Invalid private key: {e}") from e

    return Identity(address=account.address, private_key=pk, rpc_url=rpc_url)


def sign_nonce(identity: Identity, nonce: str) -> str:
    """Sign the nonce text and return a 0x-prefixed hex signature."""

    signable = encode_defunct(text=nonce)
    signed = Account.sign_message(signable, private_key=identity.private_key)
    return "0x" + bytes(signed.signature).hex()


def recover_signer(nonce: str, signature: str) -> str:
    """Return the checksummed address that produced `signature` over `nonce`."""

    return Account.recover_message(encode_defunct(text=nonce), signature=signature)


__all__ = [
    "Identity",
    "IdentityError",
    "load_identity",
    "sign_nonce",
    "recover_signer",
]
