"""Core launch logic for launchwrap (no CLI or presentation code)."""
