"""
NftGate — Wallet Verification & Discord Role Relay
===================================================
Links a Discord identity to one or more wallet addresses, checks on-chain
NFT and staking holdings for those wallets, and relays the resulting counts
to a Discord bot so it can grant or revoke holder roles.

Package layout::

    nftgate/
    ├── config.py          # YAML → typed Python config
    ├── constants.py       # Timeouts, thresholds, dashboard buckets
    ├── errors.py          # Error taxonomy with HTTP status codes
    ├── core/
    │   ├── models.py      # Session / WalletRecord / PendingRoleUpdate
    │   ├── sessions.py    # In-memory session store (dual index)
    │   ├── relay.py       # Pending role-update mailbox
    │   ├── sweeper.py     # Periodic expiry sweep
    │   ├── verification.py # Wallet verification workflow
    │   └── dashboard.py   # Read-only summary statistics
    ├── chain/
    │   ├── abi.py         # Contract ABI fragments
    │   └── client.py      # web3.py chain query capability
    ├── api/
    │   ├── main.py        # FastAPI app
    │   ├── deps.py        # Dependency providers + API key check
    │   └── routes/        # Session, relay and dashboard endpoints
    └── bot/
        ├── core.py        # Bot subclass, cog loader
        ├── roles.py       # Holder role policy
        ├── relay_client.py # HTTP client for the relay endpoints
        └── cogs/
            └── role_sync.py  # Poll → apply roles → report completion
"""

__version__ = "0.1.0"
