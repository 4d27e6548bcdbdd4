"""
Data types shared across Cordscribe.

- **discord_datatypes.py**: opaque wrappers for channel, message and user ids.
- **message_datatypes.py**: the immutable `ChatMessage` record parsed from REST
  payloads and the `ChannelMessageSet` the fetch loop fills.
- **dataset_datatypes.py**: `ConversationRecord`, the three-turn training example.
- **errors.py**: the exception and warning classes raised by every component.
"""
