"""
Install services — packages, runtimes, repositories and shell wiring.

Every external command goes through ``dotctl.adapters.shell.command``.
"""
