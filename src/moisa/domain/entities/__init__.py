from .playback import (
    IndexerUnavailableError,
    InvalidPlayRequestError,
    MoisaError,
    PlayRequest,
)
from .stremio import (
    Candidate,
    ListingContext,
    ListingResult,
    StreamExtra,
    StreamListing,
    StremioContentType,
)

__all__ = [
    "Candidate",
    "IndexerUnavailableError",
    "InvalidPlayRequestError",
    "ListingContext",
    "ListingResult",
    "MoisaError",
    "PlayRequest",
    "StreamExtra",
    "StreamListing",
    "StremioContentType",
]
