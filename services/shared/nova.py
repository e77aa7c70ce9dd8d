"""Amazon Nova model descriptors."""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional

INPUT_TEXT = "input-text"
INPUT_IMAGE = "input-image"
INPUT_MESSAGES = "input-messages"
OUTPUT_TEXT = "output-text"
TOOL_CALLING = "tool-calling"

MICRO = "nova-micro"
LITE = "nova-lite"
PRO = "nova-pro"
PREMIER = "nova-premier"

_TEXT_ONLY = frozenset({INPUT_TEXT, INPUT_MESSAGES, OUTPUT_TEXT, TOOL_CALLING})
_MULTIMODAL = _TEXT_ONLY | {INPUT_IMAGE}

CAPABILITIES: Dict[str, FrozenSet[str]] = {
    MICRO: _TEXT_ONLY,
    LITE: _MULTIMODAL,
    PRO: _MULTIMODAL,
    PREMIER: _MULTIMODAL,
}


@dataclass(frozen=True)
class Nova:
    """A Nova model identified by its short name (e.g. ``nova-pro``)."""
    name: str
    capabilities: FrozenSet[str] = frozenset()
    options: Dict = field(default_factory=dict, hash=False, compare=False)

    def supports(self, capability: str) -> bool:
        return capability in self.capabilities


def get_model(name: str, options: Optional[Dict] = None) -> Nova:
    """Build a descriptor for a known Nova model name."""
    if name not in CAPABILITIES:
        raise ValueError(
            f"Unknown Nova model '{name}', expected one of {sorted(CAPABILITIES)}"
        )
    return Nova(name=name, capabilities=CAPABILITIES[name], options=dict(options or {}))
