"""
Conversation memory service.

Persists chat turns grouped into sessions, stores condensed summaries of
those turns, and ranks prior summaries by semantic relevance to a new message.
"""

__version__ = "0.1.0"
