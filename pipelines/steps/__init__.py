# Namespace for pipeline steps, in run order
from .gather_evidence import GatherEvidence  # noqa: F401
from .extract_connections import ExtractConnections  # noqa: F401
from .validate_connections import ValidateConnections  # noqa: F401
from .aggregate_evidence import AggregateEvidence  # noqa: F401
from .score_alignment import ScoreAlignment  # noqa: F401
from .synthesize_portfolio import SynthesizePortfolio  # noqa: F401
