"""
Application layer - Use cases and orchestration.

This layer classifies units, builds the dependency graph and orders candidates.
It depends only on the Domain layer.
"""

from .classifier import CandidateClassifier
from .cycle_diagnoser import CycleDiagnoser
from .engine import ResolutionEngine
from .exemption_policy import ExemptionPolicy, is_builtin_exempt
from .graph_builder import DependencyGraphBuilder
from .registration_builder import AutoDialRegistrationBuilder
from .topological_orderer import TopologicalOrderer

__all__ = [
    "AutoDialRegistrationBuilder",
    "ResolutionEngine",
    "CandidateClassifier",
    "ExemptionPolicy",
    "is_builtin_exempt",
    "DependencyGraphBuilder",
    "TopologicalOrderer",
    "CycleDiagnoser",
]
