"""AgentRadar: Weighted multi-provider discovery of AI agents on the local machine."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
