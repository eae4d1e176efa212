"""plastic-auto — keep Plastic SCM workspaces clean and up to date."""

__version__ = "0.1.0"
