"""LP token resolution.

Maps an LP token identity back to the pool that issues it:
- a native denom ``<prefix><pool_id>`` names a native-module pool
- a contract-issued token was instantiated by its pair contract, so the
  token's creator is asked for its pair info

Resolution only checks that the token is plausibly an LP token of the pool
it points at. It does not consult any registry of officially listed pools.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from dexcore.config import DEFAULT_POOL_CONFIG, PoolConfig
from dexcore.errors import NotLpToken, QueryError
from dexcore.models import AssetInfo, PoolIdentity

if TYPE_CHECKING:
    from dexcore.querier import PoolQuerier

logger = structlog.get_logger()


def parse_native_pool_id(denom: str, prefix: str) -> int | None:
    """Extract the pool id from a native LP denom.

    Returns:
        The pool id, or None if ``denom`` is not ``prefix`` followed by
        decimal digits
    """
    if not denom.startswith(prefix):
        return None
    suffix = denom[len(prefix) :]
    if not suffix or not suffix.isascii() or not suffix.isdigit():
        return None
    return int(suffix)


def resolve_lp_token(
    querier: PoolQuerier, lp_token: AssetInfo, config: PoolConfig = DEFAULT_POOL_CONFIG
) -> PoolIdentity:
    """Resolve the identity of the pool issuing ``lp_token``.

    Args:
        querier: Source of contract and pool metadata
        lp_token: Candidate LP token
        config: Supplies the reserved native LP denom prefix

    Returns:
        Identity of the issuing pool

    Raises:
        NotLpToken: If the token matches neither LP shape, a read fails, or
            the resolved pool reports a different LP token
    """
    try:
        if lp_token.is_native:
            pool_id = parse_native_pool_id(lp_token.identifier, config.lp_denom_prefix)
            if pool_id is None:
                raise NotLpToken(lp_token)
            identity = querier.query_native_pool(pool_id)
        else:
            creator = querier.query_contract_creator(lp_token.identifier)
            identity = querier.query_pair_info(creator)
    except QueryError as e:
        logger.debug("lp_token_resolution_failed", lp_token=str(lp_token), error=str(e))
        raise NotLpToken(lp_token) from e

    if identity.lp_token != lp_token:
        logger.debug(
            "lp_token_mismatch",
            lp_token=str(lp_token),
            pool=identity.address,
            pool_lp_token=str(identity.lp_token),
        )
        raise NotLpToken(lp_token)

    logger.debug(
        "lp_token_resolved",
        lp_token=str(lp_token),
        pool=identity.address,
        curve=identity.curve.value,
    )
    return identity


__all__ = ["parse_native_pool_id", "resolve_lp_token"]
