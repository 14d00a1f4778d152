"""
Takeover Service

Funding safety and settlement engine for token takeover campaigns.

Features:
- Funding goal and contribution ceiling derived from the reward reserve
- Contribution admission that never overcommits the reserve
- One-shot finalization on goal met or expiry
- Reward and refund settlement, claimable at most once
- Event-driven integration with other services
"""

__version__ = "1.0.0"
__service__ = "takeover_service"
