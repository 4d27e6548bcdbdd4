"""
Utility helpers for Cordscribe.

- **logger.py**: Centralized logging configuration with colored console output
  through prompt_toolkit, a rotating per-session log file and a global
  exception hook. Silences noisy Discord and networking loggers.
"""
