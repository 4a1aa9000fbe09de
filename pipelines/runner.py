from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Literal, Optional, Protocol, TypeVar

from models.contact import Contact, RequesterProfile
from models.evidence import EvidenceItem
from models.connection import DiscoveredConnection
from models.portfolio import PortfolioInsight
from utils.logging_setup import init_logging


T = TypeVar("T")
StageStatus = Literal["ok", "degraded", "none"]
DiscoveryState = Literal["idle", "searching", "analyzing", "aligning", "complete", "degraded", "error"]


@dataclass
class StageResult(Generic[T]):
    """Outcome of one stage. 'degraded' carries usable data; 'none' means nothing usable."""

    status: StageStatus
    data: T
    detail: Optional[str] = None

    @classmethod
    def ok(cls, data: T) -> "StageResult[T]":
        return cls("ok", data)

    @classmethod
    def degraded(cls, data: T, detail: str) -> "StageResult[T]":
        return cls("degraded", data, detail)

    @classmethod
    def none(cls, data: T, detail: str) -> "StageResult[T]":
        return cls("none", data, detail)


@dataclass
class RunContext:
    contact: Contact
    requester: RequesterProfile
    objective: Optional[str] = None
    depth: str = "medium"
    request_id: str = ""
    state: DiscoveryState = "idle"
    evidence: List[EvidenceItem] = field(default_factory=list)
    connections: List[DiscoveredConnection] = field(default_factory=list)
    portfolio: Optional[PortfolioInsight] = None
    total_searches: int = 0
    # step name -> StageResult status
    outcomes: Dict[str, str] = field(default_factory=dict)
    meta: Dict[str, Any] = field(default_factory=dict)
    # Set by a step to skip the remaining ones
    halted: bool = False


class Step(Protocol):
    name: str

    def run(self, ctx: RunContext) -> RunContext:
        ...


class Pipeline:
    def __init__(self, steps: List[Step]):
        self.steps = steps

    def run(self, ctx: RunContext) -> RunContext:
        # Make logging idempotent for any direct runner use
        init_logging()
        for step in self.steps:
            if ctx.halted:
                break
            t0 = time.time()
            ctx = step.run(ctx)
            logging.info(
                f"step {step.name} finished",
                extra={
                    "step": step.name,
                    "state": ctx.state,
                    "status": ctx.outcomes.get(step.name, "-"),
                    "searches": ctx.total_searches,
                    "duration_ms": int((time.time() - t0) * 1000),
                    "request_id": ctx.request_id,
                },
            )
        return ctx
