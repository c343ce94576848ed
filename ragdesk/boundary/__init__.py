"""
Boundary layer.

Adapters for external collaborators: embedding and chat models, the rerank
service, the vector index and file parsing.
"""
