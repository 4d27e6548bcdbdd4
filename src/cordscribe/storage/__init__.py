"""
On-disk persistence for Cordscribe.

- **snapshot_store.py**: atomic JSON writers for per-channel and combined
  snapshots, user-filter output and JSONL datasets, plus the loader that turns
  a stored snapshot back into `ChatMessage` objects.
"""
