"""
Torrust Index configuration engine.

Resolves the index's single settings document from an inline TOML payload
or a TOML file, environment-variable overrides and compiled-in defaults,
then serves it to the rest of the process through a lock-guarded handle.
"""

__version__ = "2.0.0"
