"""
nftgate.errors — Error Taxonomy
================================

Every per-request failure the core can produce is one of these exceptions.
Each carries the HTTP status the API boundary should answer with, and an
optional ``detail`` dict that is echoed back to the client as ``details``.
Nothing here is fatal to the process.
"""

from __future__ import annotations

from typing import Any


class NftGateError(Exception):
    """Base class for all expected, per-request failures."""

    status_code: int = 500

    def __init__(self, message: str, *, detail: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.message}
        if self.detail:
            body["details"] = self.detail
        return body


class ValidationError(NftGateError):
    """Missing or malformed request fields (user-correctable)."""

    status_code = 400


class InvalidAddress(ValidationError):
    """The submitted wallet address is not a valid EVM address."""

    def __init__(self, address: str) -> None:
        super().__init__(f"Invalid wallet address: {address}", detail={"address": address})
        self.address = address


class SessionNotFound(NftGateError):
    status_code = 404

    def __init__(self, session_id: str) -> None:
        super().__init__("Session not found", detail={"sessionId": session_id})
        self.session_id = session_id


class NoHoldingsFound(NftGateError):
    """Deliberate reject: the address holds and stakes nothing."""

    status_code = 400

    def __init__(self, wallet_balance: int, staked_tokens: int) -> None:
        super().__init__(
            "No NFTs found for this address",
            detail={"walletBalance": wallet_balance, "stakedTokens": staked_tokens},
        )
        self.wallet_balance = wallet_balance
        self.staked_tokens = staked_tokens


class ChainQueryFailed(NftGateError):
    """A chain capability call failed.  The cause is chained via ``__cause__``."""

    status_code = 500

    def __init__(self, message: str = "Failed to verify NFT ownership", *, reason: str | None = None) -> None:
        super().__init__(message, detail={"reason": reason} if reason else None)


class ChainUnreachable(ChainQueryFailed):
    def __init__(self, reason: str | None = None) -> None:
        super().__init__("Failed to connect to blockchain", reason=reason)


class ContractReverted(ChainQueryFailed):
    def __init__(self, reason: str | None = None) -> None:
        super().__init__("Contract call reverted", reason=reason)


class ChainQueryTimeout(ChainQueryFailed):
    def __init__(self, timeout: float) -> None:
        super().__init__(
            "Blockchain query timed out",
            reason=f"no response within {timeout:g}s",
        )
        self.timeout = timeout


class InternalError(NftGateError):
    """Unexpected failure.  Only the message string reaches the client."""

    status_code = 500

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message)
