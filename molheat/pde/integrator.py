"""
Adaptive explicit Runge-Kutta time integration with dense output.

`AdaptiveIntegrator` advances the interior state with an embedded
Runge-Kutta pair from :mod:`scipy.integrate`, one accepted step at a time.
The default pair is Dormand-Prince 8(5,3) (``DOP853``), whose error
estimate controls the step with per-component tolerances
``atol + rtol * max(|u_i|, |u_i_new|)`` combined in an RMS norm; a step is accepted when
the scaled norm is at most one, otherwise it is shrunk and retried from
the same time. After each accepted step the stepper's 7th-order dense
interpolant is handed to the output model, and the boundary samples the
derivative function buffered for that step are committed; samples from
rejected trial steps are dropped.

On top of the stepper this module enforces the minimum step size, checks
that the state stays finite and tracks a small state machine so that a
failed run is distinguishable from a finished one.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Dict, List, Optional, Type

import numpy as np
from scipy.integrate import DOP853, RK23, RK45, OdeSolver

from ..exceptions import EvaluationError, IntegrationError, InvalidParameterError
from ..logging import get_logger
from .output import AcceptedStep, BoundarySample, ContinuousOutputModel

logger = get_logger(__name__)

RHSFunction = Callable[[float, np.ndarray], np.ndarray]

_STEPPERS: Dict[str, Type[OdeSolver]] = {
    "DOP853": DOP853,
    "RK45": RK45,
    "RK23": RK23,
}


def _take_pending(fun: RHSFunction) -> List[BoundarySample]:
    take = getattr(fun, "take_pending", None)
    return list(take()) if take is not None else []


def _commit(fun: RHSFunction, samples: List[BoundarySample]) -> None:
    if samples:
        fun.commit(samples)


class IntegratorState(Enum):
    """Lifecycle of a single integration."""

    NOT_STARTED = "not_started"
    STEPPING = "stepping"
    FINISHED = "finished"
    FAILED = "failed"


class AdaptiveIntegrator:
    """
    Embedded Runge-Kutta integrator with error control and dense output.

    Parameters
    ----------
    rel_tol, abs_tol:
        Relative and absolute tolerance of the local error estimate.
    min_step:
        Smallest accepted step before reaching the end of the interval.
        A step collapsing below it aborts the run.
    max_step:
        Largest step the controller may take.
    method:
        ``"DOP853"`` (order 8), ``"RK45"`` (order 5) or ``"RK23"`` (order 3).
    first_step:
        Initial step size; chosen automatically when ``None``.
    """

    def __init__(
        self,
        rel_tol: float,
        abs_tol: float,
        min_step: float = 1e-12,
        max_step: float = 100.0,
        method: str = "DOP853",
        first_step: Optional[float] = None,
    ) -> None:
        method = method.upper()
        if method not in _STEPPERS:
            raise InvalidParameterError("method", method, f"expected one of {', '.join(_STEPPERS)}")
        if min_step <= 0.0 or max_step < min_step:
            raise InvalidParameterError("max_step", max_step, "step bounds must satisfy 0 < min_step <= max_step")
        if first_step is not None and not (min_step <= first_step <= max_step):
            raise InvalidParameterError("first_step", first_step, "must lie within [min_step, max_step]")

        self.rel_tol = float(rel_tol)
        self.abs_tol = float(abs_tol)
        self.min_step = float(min_step)
        self.max_step = float(max_step)
        self.method = method
        self.first_step = first_step

        self.state = IntegratorState.NOT_STARTED
        self.last_time: Optional[float] = None
        self.last_step: Optional[float] = None
        self.evaluations = 0

    def integrate(
        self,
        fun: RHSFunction,
        t0: float,
        y0: np.ndarray,
        t1: float,
        model: ContinuousOutputModel,
    ) -> ContinuousOutputModel:
        """
        Integrate ``dy/dt = fun(t, y)`` from ``t0`` to ``t1``.

        Every accepted step is appended to ``model``. The model is not
        finalized here; the caller decides when it becomes read-only.

        Raises
        ------
        IntegrationError
            If the step size collapses below ``min_step``, the stepper
            fails, or the state or derivative becomes non-finite.
        EvaluationError
            If a boundary or initial function fails during the run.
        """
        if self.state is not IntegratorState.NOT_STARTED:
            raise RuntimeError("AdaptiveIntegrator instances integrate a single problem.")
        if not t1 > t0:
            raise InvalidParameterError("t1", t1, f"must be greater than t0={t0!r}")

        self.state = IntegratorState.STEPPING
        self.last_time = float(t0)
        logger.debug(
            "Starting %s integration on [%g, %g], rtol=%g, atol=%g",
            self.method,
            t0,
            t1,
            self.rel_tol,
            self.abs_tol,
        )

        try:
            stepper = self._make_stepper(fun, t0, y0, t1)
            # Setup evaluates at t0 and then probes a trial first step.
            _commit(fun, [s for s in _take_pending(fun) if s.time == t0])
            while stepper.status == "running":
                self._advance(fun, stepper, t1, model)
        except IntegrationError as exc:
            self._fail(exc.reason)
            if exc.last_time == self.last_time and exc.last_step == self.last_step:
                raise
            raise IntegrationError(exc.reason, self.last_time, self.last_step) from exc
        except EvaluationError as exc:
            self._fail(str(exc))
            raise

        self.state = IntegratorState.FINISHED
        logger.debug(
            "Finished integration: %d steps, %d derivative evaluations",
            model.step_count(),
            self.evaluations,
        )
        return model

    def _make_stepper(self, fun: RHSFunction, t0: float, y0: np.ndarray, t1: float) -> OdeSolver:
        stepper_cls = _STEPPERS[self.method]
        return stepper_cls(
            fun,
            float(t0),
            np.asarray(y0, dtype=float),
            float(t1),
            max_step=self.max_step,
            rtol=self.rel_tol,
            atol=self.abs_tol,
            first_step=self.first_step,
        )

    def _advance(self, fun: RHSFunction, stepper: OdeSolver, t1: float, model: ContinuousOutputModel) -> None:
        _take_pending(fun)
        message = stepper.step()
        # Rejected trials are retried inside step(); the accepted trial is
        # the last n_stages evaluations (inner stages plus the end point).
        accepted = _take_pending(fun)[-stepper.n_stages:]
        self.evaluations = stepper.nfev
        if stepper.status == "failed":
            raise IntegrationError(
                f"step rejected without meeting tolerances: {message}",
                self.last_time,
                self.last_step,
            )

        t_start, t_end = float(stepper.t_old), float(stepper.t)
        step = t_end - t_start
        # The final step may be clipped to t1, so it is exempt from the bound.
        if step < self.min_step and t_end < t1:
            raise IntegrationError(
                f"step size {step!r} fell below the minimum {self.min_step!r}",
                self.last_time,
                self.last_step,
            )
        if not np.all(np.isfinite(stepper.y)):
            raise IntegrationError(f"non-finite state at t={t_end!r}", self.last_time, self.last_step)

        interpolant = stepper.dense_output()
        # DOP853 evaluates extra stages of the accepted step for its interpolant.
        accepted.extend(_take_pending(fun))
        model.append_step(AcceptedStep(t_start, t_end, interpolant))
        _commit(fun, accepted)
        self.evaluations = stepper.nfev
        self.last_time = t_end
        self.last_step = step

    def _fail(self, reason: str) -> None:
        self.state = IntegratorState.FAILED
        logger.error(
            "Integration failed: %s (last accepted time %r, last step %r)",
            reason,
            self.last_time,
            self.last_step,
        )


__all__ = ["AdaptiveIntegrator", "IntegratorState"]
