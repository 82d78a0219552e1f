"""ETH balance resolution across public JSON-RPC endpoints.

Endpoints are tried one after another in fixed priority order. Each
attempt is bounded by a timeout; a failed attempt is followed by a short
backoff before the next endpoint is tried. The first answer wins.
Concurrent requests for the same address share one resolution.

Failure of every endpoint is reported in the result, never raised.
"""

import asyncio
import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from functools import lru_cache
from typing import Optional, Sequence

import httpx

from ethwallet.config import get_settings
from ethwallet.contracts.balances import BalanceErrorKind, BalanceResult
from ethwallet.hdwallet.eth import is_valid_address, to_checksum_address
from ethwallet.utils.inflight import InflightRegistry

logger = logging.getLogger(__name__)

WEI_PER_ETH = 10**18


class RpcResponseError(Exception):
    """Raised when an endpoint answers with an error or an unusable payload."""

    def __init__(self, endpoint: str, message: str):
        super().__init__(f"{endpoint}: {message}")
        self.endpoint = endpoint


def wei_to_eth(wei: int) -> str:
    """Convert wei to an exact ETH decimal string.

    Trailing zeros are trimmed but one fractional digit is always kept:
    1500000000000000000 -> "1.5", 0 -> "0.0".
    """
    if wei < 0:
        raise ValueError(f"Negative balance: {wei}")
    whole, frac = divmod(wei, WEI_PER_ETH)
    frac_str = f"{frac:018d}".rstrip("0") or "0"
    return f"{whole}.{frac_str}"


def format_balance(balance_in_eth: str) -> str:
    """Format an ETH amount for display with magnitude-dependent precision.

    Raises:
        ValueError: If the input is not a decimal number
    """
    try:
        balance = Decimal(balance_in_eth)
    except (InvalidOperation, TypeError) as e:
        raise ValueError(f"Invalid balance: {balance_in_eth!r}") from e
    if not balance.is_finite():
        raise ValueError(f"Invalid balance: {balance_in_eth!r}")

    if balance == 0:
        return "0.00 ETH"
    elif balance < Decimal("0.000001"):
        places = 8
    elif balance < Decimal("0.001"):
        places = 6
    elif balance < 1:
        places = 4
    else:
        places = 2

    quantized = balance.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
    return f"{quantized:f} ETH"


class BalanceResolver:
    """Resolves native ETH balances with endpoint failover.

    Usage:
        resolver = BalanceResolver()
        result = await resolver.get_balance("0x...")
        if result.success:
            print(result.display, "via", result.succeeded_endpoint)
    """

    def __init__(
        self,
        endpoints: Optional[Sequence[str]] = None,
        timeout: Optional[float] = None,
        backoff: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the resolver.

        Args:
            endpoints: RPC URLs in priority order (default: settings)
            timeout: Per-attempt timeout in seconds (default: settings)
            backoff: Delay between attempts in seconds (default: settings)
            transport: Optional httpx transport, mainly for tests
        """
        settings = get_settings()
        self.endpoints = list(endpoints if endpoints is not None else settings.eth_rpc_urls)
        self.timeout = settings.rpc_timeout if timeout is None else timeout
        self.backoff = settings.rpc_backoff if backoff is None else backoff
        self._transport = transport
        self._inflight = InflightRegistry()

    @property
    def pending_count(self) -> int:
        """Number of addresses currently being resolved."""
        return len(self._inflight)

    async def get_balance(self, address: str) -> BalanceResult:
        """Get the ETH balance of an address.

        If a resolution for the same address is already running, the
        caller attaches to it and receives the same result object.
        """
        if not is_valid_address(address):
            logger.warning(f"Refusing balance lookup for invalid address {address!r}")
            return BalanceResult.failure(
                BalanceErrorKind.INVALID_ADDRESS, f"Invalid address: {address}"
            )

        # Nodes require the 0x prefix
        address = to_checksum_address(address)
        return await self._inflight.run(
            address.lower(), lambda: self._resolve(address)
        )

    async def _resolve(self, address: str) -> BalanceResult:
        """Walk the endpoint list until one answers."""
        total = len(self.endpoints)
        logger.info(f"Fetching balance for {address} ({total} endpoints)")

        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self._transport
        ) as client:
            for i, endpoint in enumerate(self.endpoints):
                logger.debug(f"Trying RPC {i + 1}/{total}: {endpoint}")

                try:
                    wei = await asyncio.wait_for(
                        self._fetch_balance(client, endpoint, address),
                        timeout=self.timeout,
                    )
                except Exception as e:
                    reason = "timeout" if isinstance(e, asyncio.TimeoutError) else repr(e)
                    logger.warning(f"Failed to fetch balance from {endpoint}: {reason}")
                    if i < total - 1:
                        await asyncio.sleep(self.backoff)
                    continue

                balance_in_eth = wei_to_eth(wei)
                logger.info(
                    f"Fetched balance from {endpoint}: {balance_in_eth} ETH"
                )
                return BalanceResult(
                    raw_balance_wei=str(wei),
                    balance_in_eth=balance_in_eth,
                    succeeded_endpoint=endpoint,
                )

        logger.error(f"All {total} RPC endpoints failed for {address}")
        return BalanceResult.failure(
            BalanceErrorKind.ALL_ENDPOINTS_FAILED,
            "Failed to fetch balance from all RPC endpoints",
        )

    async def _fetch_balance(
        self, client: httpx.AsyncClient, endpoint: str, address: str
    ) -> int:
        """Query one endpoint with eth_getBalance at the latest block."""
        response = await client.post(
            endpoint,
            json={
                "jsonrpc": "2.0",
                "method": "eth_getBalance",
                "params": [address, "latest"],
                "id": 1,
            },
        )
        response.raise_for_status()

        data = response.json()
        if not isinstance(data, dict):
            raise RpcResponseError(endpoint, f"Unexpected payload: {data!r}")
        if data.get("error"):
            raise RpcResponseError(endpoint, f"RPC error: {data['error']}")

        result = data.get("result")
        if not isinstance(result, str) or not result.startswith("0x"):
            raise RpcResponseError(endpoint, f"Malformed result: {result!r}")

        return int(result, 16)


@lru_cache
def get_balance_resolver() -> BalanceResolver:
    """Get the shared resolver so all callers coalesce on one registry."""
    return BalanceResolver()
