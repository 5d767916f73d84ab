"""docskills: documentation templates for human readers and AI agents."""

__version__ = "0.1.0"
