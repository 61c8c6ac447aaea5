from pdb_gateway.models.common import RequestMode, ResponseError, OutcomeKind, AttemptOutcome
from pdb_gateway.models.server import ServerUrl, PdbConfig

__all__ = [
    "RequestMode",
    "ResponseError",
    "OutcomeKind",
    "AttemptOutcome",
    "ServerUrl",
    "PdbConfig"
]
