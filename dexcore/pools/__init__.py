"""Pool dispatch package.

Provides Pool, the serializable union over pool variants, and LP token
resolution.
"""

from .dispatcher import AnyPool, Pool
from .resolver import parse_native_pool_id, resolve_lp_token

__all__ = [
    "AnyPool",
    "Pool",
    "parse_native_pool_id",
    "resolve_lp_token",
]
