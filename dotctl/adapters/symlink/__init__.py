"""Symlinker implementations: native ``os.symlink`` and GNU Stow."""
