"""Services — the operations behind each CLI command."""
