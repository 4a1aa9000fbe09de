from __future__ import annotations

from data_extractor import ConnectionExtractor
from pipelines.runner import RunContext


class ExtractConnections:
    name = "extract_connections"

    def __init__(self, extractor: ConnectionExtractor, max_connections: int = 10) -> None:
        self.extractor = extractor
        self.max_connections = max_connections

    def run(self, ctx: RunContext) -> RunContext:
        ctx.state = "analyzing"
        result = self.extractor.extract(
            ctx.contact, ctx.evidence, ctx.requester, ctx.objective, self.max_connections
        )
        ctx.outcomes[self.name] = result.status
        ctx.connections = result.data
        return ctx
