"""
DegenScore: reputation scoring for Solana trading wallets.

Turns a batch of historical swap activity into trades, per-token positions,
aggregate trading statistics and a bounded 0-100 DegenScore. The analytics
core is pure and synchronous; retrieval and the CLI live beside it.
"""

__version__ = "0.1.0"
