"""Source ingestion: chunk, embed and index course material."""

from edurag.pipeline.ingest import IngestPipeline
from edurag.pipeline.rate_limit import RateLimiter
from edurag.pipeline.schemas import IngestResult

__all__ = ["IngestPipeline", "IngestResult", "RateLimiter"]
