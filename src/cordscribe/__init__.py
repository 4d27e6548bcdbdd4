"""
Cordscribe - Discord history to fine-tuning data

Cordscribe downloads the message history of a Discord guild and turns one
member's messages into a chat fine-tuning dataset.

Core Components:

- **History fetch**: pages backward through every text channel, 100 messages
  at a time with a fixed pause between requests, checkpointing a JSON
  snapshot after every page
- **User filter**: extracts one author's messages from a snapshot
- **Dataset compiler**: builds system/user/assistant JSONL records, using the
  replied-to message as the prompt when there is one

Usage:
    from cordscribe.main import main
    main(["fetch", "123,456"])
"""
