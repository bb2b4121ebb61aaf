"""dotctl — dotfiles bootstrap and configuration management."""

__version__ = "0.1.0"
