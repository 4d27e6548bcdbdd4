"""
Discord message history fetching.

This package provides:

- **page_fetcher.py**: one REST request for up to 100 messages older than a
  cursor, converted to `ChatMessage` objects. Failures surface as `FetchError`.
- **channel_accumulator.py**: the per-channel loop that pages backward through
  history, keeps the channel's messages sorted, writes a snapshot after every
  page and pauses a fixed delay between requests.
- **orchestrator.py**: walks the client's channel list sequentially, applies
  the skip-list and text-channel filter, and writes the combined snapshot.
"""
