"""Utility modules for ethwallet."""

from ethwallet.utils.inflight import InflightRegistry

__all__ = ["InflightRegistry"]
