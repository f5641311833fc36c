"""
Adapters — the only code that touches processes and the network.
"""

from eks_toolbox.adapters.base import CommandResult, Fetcher, Runner

__all__ = ["CommandResult", "Fetcher", "Runner"]
