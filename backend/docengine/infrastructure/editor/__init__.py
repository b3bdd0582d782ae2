from .debounce import DebouncedWriter
from .engine import EditorBlock, EditorInteractionEngine, Focus, Key
from .state import IDLE, SLASH_CANDIDATES, Idle, SlashCandidate, SlashMenu, SlashMenuOpen, filter_candidates
from .store import BlockRecord, DocumentStore, HttpDocumentStore, PageRecord

__all__ = [
    "BlockRecord",
    "DebouncedWriter",
    "DocumentStore",
    "EditorBlock",
    "EditorInteractionEngine",
    "Focus",
    "HttpDocumentStore",
    "IDLE",
    "Idle",
    "Key",
    "PageRecord",
    "SLASH_CANDIDATES",
    "SlashCandidate",
    "SlashMenu",
    "SlashMenuOpen",
    "filter_candidates",
]
