"""molheat - method-of-lines solver for the one-dimensional heat equation."""

__version__ = "0.1.0"

from .config import SolverOptions
from .exceptions import (
    EvaluationError,
    IntegrationError,
    InvalidParameterError,
    MolHeatError,
    QueryOutOfRangeError,
)
from .expression import parse_function
from .logging import configure_logging, get_logger, set_log_level
from .pde import (
    AcceptedStep,
    AdaptiveIntegrator,
    BoundaryFunctions,
    BoundaryKind,
    BoundarySample,
    BoundaryScheme,
    ContinuousOutputModel,
    FixedFluxBoundary,
    FixedValueBoundary,
    HeatDerivative,
    HeatProblem,
    IntegratorState,
    MeshConfig,
    SolveResult,
    make_boundary_scheme,
    solve_heat,
)

__all__ = [
    "__version__",
    # Configuration
    "SolverOptions",
    # Errors
    "MolHeatError",
    "InvalidParameterError",
    "EvaluationError",
    "IntegrationError",
    "QueryOutOfRangeError",
    # Expressions
    "parse_function",
    # Logging
    "configure_logging",
    "get_logger",
    "set_log_level",
    # Method of lines
    "AcceptedStep",
    "AdaptiveIntegrator",
    "BoundaryFunctions",
    "BoundaryKind",
    "BoundarySample",
    "BoundaryScheme",
    "ContinuousOutputModel",
    "FixedFluxBoundary",
    "FixedValueBoundary",
    "HeatDerivative",
    "HeatProblem",
    "IntegratorState",
    "MeshConfig",
    "SolveResult",
    "make_boundary_scheme",
    "solve_heat",
]
