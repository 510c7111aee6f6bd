"""User contexts, experiment groups, assignment options and exposure records for A/B testing clients."""

__version__ = "0.1.6"
__all__ = ["env", "netinfo", "group", "user", "options", "exposure"]