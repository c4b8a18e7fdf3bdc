"""edurag — course-material chunking, embedding, retrieval, and generated-content validation."""

__version__ = "0.1.0"
