"""Adapters for external tools."""
from solkit.services.solution import Aggregator, DotnetSolution

__all__ = ['Aggregator', 'DotnetSolution']
