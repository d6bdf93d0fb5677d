from .in_memory_vector_index import InMemoryVectorIndex
from .vector_index_factory import create_vector_index

__all__ = [
    "InMemoryVectorIndex",
    "create_vector_index",
]
