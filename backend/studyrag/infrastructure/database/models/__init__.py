from .document_models import DocumentModel
from .vector_entry_models import VectorEntryModel

__all__ = [
    "DocumentModel",
    "VectorEntryModel",
]
