"""EC2 query API: canonicalization, signing, decoding and the compute wrappers."""

from .compute import Compute
from .query import QueryClient

__all__ = [
    "Compute",
    "QueryClient",
]
