"""
Configuration management for Cordscribe.

- **app_configuration.py**: YAML configuration loader for global settings
  (output directory, fetch section) and the ``.env`` based Discord token
  loader. Falls back to defaults on missing or malformed config files.

- **fetch_settings.py**: Typed accessors for the fetch loop knobs: page size,
  fixed delay between pages, optional page cap and configured skip-list.
"""
