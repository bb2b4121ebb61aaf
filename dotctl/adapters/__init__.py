"""Adapters — bindings to the filesystem and external tools.

Import concrete symlinkers from their modules:

    from dotctl.adapters.symlink.native import NativeSymlinker
    from dotctl.adapters.symlink.stow import StowSymlinker
"""
