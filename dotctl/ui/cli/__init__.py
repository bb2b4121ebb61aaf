"""Click command groups, registered on the root group in ``dotctl.main``."""
