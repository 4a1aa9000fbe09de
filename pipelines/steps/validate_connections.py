from __future__ import annotations

from data_validator import DataValidator
from pipelines.runner import RunContext


class ValidateConnections:
    name = "validate_connections"

    def __init__(self, validator: DataValidator) -> None:
        self.validator = validator

    def run(self, ctx: RunContext) -> RunContext:
        ctx.connections = self.validator.validate_all_connections(ctx.connections)
        ctx.outcomes[self.name] = "ok" if ctx.connections else "none"
        # Attach validation stats into meta for optional logging
        ctx.meta["validation_stats"] = self.validator.get_validation_stats()
        if not ctx.connections:
            # Nothing left to score
            ctx.halted = True
        return ctx
