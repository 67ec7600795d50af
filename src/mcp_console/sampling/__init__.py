# mcp_console/sampling/__init__.py
"""Server → client sampling: typed channel plus the confirm-then-generate bridge."""
from mcp_console.sampling.bridge import (
    Contribution,
    Outcome,
    SamplingBridge,
    join_contributions,
    run_prompt_message,
)
from mcp_console.sampling.channel import SamplingChannel, SamplingRequest

__all__ = [
    "Contribution",
    "Outcome",
    "SamplingBridge",
    "SamplingChannel",
    "SamplingRequest",
    "join_contributions",
    "run_prompt_message",
]
