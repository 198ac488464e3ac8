"""Workspace configuration loading."""
from solkit.config.loader import ConfigLoader

__all__ = ['ConfigLoader']
