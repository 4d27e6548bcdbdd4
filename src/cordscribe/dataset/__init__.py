"""
Derived outputs built from stored message snapshots.

- **user_filter.py**: keeps one author's messages from a snapshot.
- **jsonl_compiler.py**: turns messages into system/user/assistant records
  for chat fine-tuning, skipping messages with attachments, embeds, mentions
  or links.
"""
