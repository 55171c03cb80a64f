"""
Content fidelity scoring and oracle-backed authoring helpers.
"""

from .claims import extract_key_claims, generate_agent_summary
from .scorer import FidelityAssessment, FidelityScorer, FidelitySettings, assess

__all__ = [
    "FidelityAssessment",
    "FidelityScorer",
    "FidelitySettings",
    "assess",
    "extract_key_claims",
    "generate_agent_summary",
]
