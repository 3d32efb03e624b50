"""
Fusion of provider results.

- Category-timestamp association for time-coded observations
- Consensus derivation across providers for one content item
"""
from modreview.fusion.associator import associate, associate_all, attach_timestamps
from modreview.fusion.consensus import ConsensusEngine, build_consensus, CONSENSUS_PROVIDER

__all__ = [
    "associate",
    "associate_all",
    "attach_timestamps",
    "ConsensusEngine",
    "build_consensus",
    "CONSENSUS_PROVIDER",
]
