"""Maestro: persistent conversations with historical composers.

Core pieces:
- Durable blob stores (maestro.storage)
- Conversation repository and active session set (maestro.conversation)
- Session reconciler driving the displayed transcript
- Response generators (maestro.generation)
"""

__version__ = "0.1.0"
