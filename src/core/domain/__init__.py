"""
Domain models and value objects.

GeoPoint, ProximityVerdict, Auction, Bid, EscrowRecord, Dispute и
конвертеры единиц.
"""

from src.core.domain.auction import Auction, AuctionStatus, Bid
from src.core.domain.dispute import (
    PRIORITY_RANK,
    Dispute,
    DisputeMessage,
    DisputePriority,
    DisputeResolution,
    DisputeStatus,
    DisputeType,
    ResolutionDecision,
)
from src.core.domain.escrow import (
    ESCROW_TRANSITIONS,
    EscrowRecord,
    EscrowRequest,
    EscrowStatus,
)
from src.core.domain.geo import (
    CLOSE_RANGE_M,
    PROXIMITY_THRESHOLD_FEET,
    PROXIMITY_THRESHOLD_M,
    GeoPoint,
    ProximityBand,
    ProximityVerdict,
)
from src.core.domain.units import (
    METERS_PER_FOOT,
    cents_to_dollars,
    dollars_to_cents,
    feet_to_meters,
    format_distance,
    meters_to_feet,
    round_money,
)

__all__ = [
    # Units module
    "METERS_PER_FOOT",
    "feet_to_meters",
    "meters_to_feet",
    "format_distance",
    "dollars_to_cents",
    "cents_to_dollars",
    "round_money",
    # Geo
    "PROXIMITY_THRESHOLD_FEET",
    "PROXIMITY_THRESHOLD_M",
    "CLOSE_RANGE_M",
    "GeoPoint",
    "ProximityVerdict",
    "ProximityBand",
    # Auction
    "Auction",
    "AuctionStatus",
    "Bid",
    # Escrow
    "ESCROW_TRANSITIONS",
    "EscrowRecord",
    "EscrowRequest",
    "EscrowStatus",
    # Dispute
    "PRIORITY_RANK",
    "Dispute",
    "DisputeMessage",
    "DisputePriority",
    "DisputeResolution",
    "DisputeStatus",
    "DisputeType",
    "ResolutionDecision",
]
