"""
Service layer - stateful collaborators of the responder.

Services:
- ConversationStore: walkthrough sessions with idle expiry
- DocumentStore: internal documents and relevance filtering
- ChatProvider: language-model generation
"""
from .documents import DocumentStore, select_relevant
from .providers import ChatProvider, OpenAICompatibleProvider, ProviderError, create_provider
from .session_store import ConversationStore, session_key

__all__ = [
    "ChatProvider",
    "ConversationStore",
    "DocumentStore",
    "OpenAICompatibleProvider",
    "ProviderError",
    "create_provider",
    "select_relevant",
    "session_key",
]
