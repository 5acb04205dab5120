"""Route calculator - builds and costs the multi-stop route for a job.

The route always starts and ends at base. Distance and zone lookups are
independent of each other, so they run concurrently on a small thread
pool and are merged back in route order. A failed or timed-out lookup
never aborts the computation: the leg or zone check is left out of the
totals and reported as a warning.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..config import RouteConfig, get_config
from ..domain.errors import (
    ConfigurationError,
    ProviderError,
    RouteCancelledError,
    ValidationError,
)
from ..domain.models import (
    Address,
    AddressRole,
    LegMeasurement,
    LogisticsResult,
    RouteLeg,
    ZoneChargePolicy,
)
from ..ports.distance import DistanceProviderPort
from ..ports.zones import ZoneCheckerPort, ZoneProviders

# How often the join loop wakes up to check for cancellation
_POLL_INTERVAL_SECONDS = 0.05

# ("distance", from, to) or ("zone", zone name, postcode)
LookupKey = Tuple[str, ...]

_REQUIRED_AMOUNTS = (
    "congestion_fee",
    "emission_zone_fee",
    "fuel_cost_per_mile",
    "long_journey_miles",
    "long_duration_minutes",
)


@dataclass(frozen=True)
class _PlannedLeg:
    origin: Address
    destination: Address

    @property
    def pair(self) -> Tuple[str, str]:
        return self.origin.postcode, self.destination.postcode


@dataclass(frozen=True)
class _Outcome:
    value: Any = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class RouteCalculator:
    """Compute distance, time, zone charges and warnings for a job route.

    Attributes:
        distance_provider: Measures drive distance/time between postcodes
        zone_providers: Emission-zone and congestion-zone checkers
        config: Fees, thresholds, base address and lookup limits

    Raises:
        ConfigurationError: On construction, if a fee, threshold, fuel cost,
            timeout or the base postcode is missing or invalid.
    """

    distance_provider: DistanceProviderPort
    zone_providers: ZoneProviders
    config: RouteConfig = field(default_factory=lambda: get_config().route)

    _policy: ZoneChargePolicy = field(init=False, repr=False)
    _default_base: Optional[Address] = field(init=False, repr=False, default=None)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        self._validate_config()

    def compute_route(
        self,
        site: Optional[Address],
        collection: Optional[Address] = None,
        base: Optional[Address] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> LogisticsResult:
        """Build and cost the route for one job.

        Args:
            site: Installation site (required).
            collection: Optional collection point visited before the site.
            base: Base address; defaults to the configured base.
            cancel_event: Set by the caller to abandon the computation.

        Returns:
            LogisticsResult with legs in route order. Legs whose lookup
            failed are missing from ``legs`` and named in ``warnings``.

        Raises:
            ValidationError: If the site or base address is missing.
            RouteCancelledError: If cancel_event is set before all lookups finish.
        """
        if site is None:
            raise ValidationError("Site address is required", field_name="site")
        base = base or self._default_base
        if base is None:
            raise ValidationError("Base address is required", field_name="base")

        planned = self._plan_legs(base, collection, site)
        stops = self._charged_stops(planned, base)

        tasks: Dict[LookupKey, Callable[[], Any]] = {}
        for leg in planned:
            tasks.setdefault(("distance", *leg.pair), partial(self._measure, *leg.pair))
        for stop in stops:
            for zone_name, checker in self._zones():
                tasks.setdefault(
                    ("zone", zone_name, stop.postcode),
                    partial(self._check_zone, checker, stop.postcode),
                )

        self._logger.info(
            "Computing route",
            extra={
                "site": site.postcode,
                "collection": collection.postcode if collection else None,
                "legs": len(planned),
                "lookups": len(tasks),
            },
        )

        outcomes = self._run_lookups(tasks, cancel_event)
        warnings: List[str] = []

        legs: List[RouteLeg] = []
        failed: List[Tuple[str, str]] = []
        for leg in planned:
            outcome = outcomes[("distance", *leg.pair)]
            if outcome.ok:
                measurement: LegMeasurement = outcome.value
                legs.append(
                    RouteLeg(
                        from_label=leg.origin.label,
                        to_label=leg.destination.label,
                        from_postcode=leg.origin.postcode,
                        to_postcode=leg.destination.postcode,
                        distance_miles=measurement.distance_miles,
                        duration_minutes=measurement.duration_minutes,
                    )
                )
            else:
                failed.append(leg.pair)
                warnings.append(
                    f"Could not calculate distance from {leg.origin.label} "
                    f"({leg.origin.postcode}) to {leg.destination.label} "
                    f"({leg.destination.postcode})"
                )

        charges = {"ULEZ": 0.0, "Congestion": 0.0}
        fees = {
            "ULEZ": float(self.config.emission_zone_fee),  # type: ignore[arg-type]
            "Congestion": float(self.config.congestion_fee),  # type: ignore[arg-type]
        }
        for stop in stops:
            occurrences = self._charge_count(stop, planned)
            for zone_name, _checker in self._zones():
                outcome = outcomes[("zone", zone_name, stop.postcode)]
                if not outcome.ok:
                    warnings.append(
                        f"Could not check {zone_name} zone for {stop.label} ({stop.postcode})"
                    )
                elif outcome.value:
                    amount = fees[zone_name] * occurrences
                    charges[zone_name] += amount
                    warnings.append(
                        f"{stop.label} ({stop.postcode}) is in the {zone_name} zone "
                        f"- £{amount:.2f} daily charge"
                    )

        total_distance = sum(leg.distance_miles for leg in legs)
        total_duration = sum(leg.duration_minutes for leg in legs)

        if total_distance > self.config.long_journey_miles:  # type: ignore[operator]
            warnings.append(
                f"Long distance journey ({total_distance:.0f} miles) "
                "- consider overnight accommodation"
            )
        if total_duration > self.config.long_duration_minutes:  # type: ignore[operator]
            warnings.append(
                f"Extended travel time ({total_duration / 60:.1f} hours) "
                "- may require multiple drivers"
            )

        result = LogisticsResult(
            legs=tuple(legs),
            total_distance_miles=total_distance,
            total_duration_minutes=total_duration,
            ulez_charge=charges["ULEZ"],
            congestion_charge=charges["Congestion"],
            warnings=tuple(warnings),
            estimated_fuel_cost=round(
                total_distance * self.config.fuel_cost_per_mile, 2  # type: ignore[operator]
            ),
            failed_legs=tuple(failed),
        )

        self._logger.info(
            "Route computed",
            extra={
                "legs": len(result.legs),
                "failed_legs": len(result.failed_legs),
                "distance_miles": round(result.total_distance_miles, 1),
                "duration_minutes": round(result.total_duration_minutes, 1),
                "zone_charges": result.total_zone_charges,
            },
        )
        return result

    # -- planning -------------------------------------------------------

    @staticmethod
    def _plan_legs(
        base: Address, collection: Optional[Address], site: Address
    ) -> List[_PlannedLeg]:
        if collection is not None and collection.postcode != site.postcode:
            return [
                _PlannedLeg(base, collection),
                _PlannedLeg(collection, site),
                _PlannedLeg(site, base),
            ]
        return [_PlannedLeg(base, site), _PlannedLeg(site, base)]

    def _charged_stops(self, planned: List[_PlannedLeg], base: Address) -> List[Address]:
        """Non-base stops in route order, one per postcode."""
        stops: List[Address] = []
        seen = set()
        for leg in planned:
            stop = leg.destination
            if stop is base or stop.role == AddressRole.BASE or stop.postcode in seen:
                continue
            seen.add(stop.postcode)
            stops.append(stop)
        return stops

    def _charge_count(self, stop: Address, planned: List[_PlannedLeg]) -> int:
        if self._policy == ZoneChargePolicy.PER_UNIQUE_POSTCODE:
            return 1
        # Matched by identity; a base sharing the stop's postcode never counts
        return sum(
            (leg.origin is stop) + (leg.destination is stop) for leg in planned
        )

    def _zones(self) -> Tuple[Tuple[str, ZoneCheckerPort], ...]:
        return (
            ("ULEZ", self.zone_providers.emission),
            ("Congestion", self.zone_providers.congestion),
        )

    # -- lookups --------------------------------------------------------

    def _measure(self, from_postcode: str, to_postcode: str) -> LegMeasurement:
        measurement = self.distance_provider.measure(from_postcode, to_postcode)
        if not isinstance(measurement, LegMeasurement):
            raise ProviderError(
                f"No distance result for {from_postcode} -> {to_postcode}",
                provider=type(self.distance_provider).__name__,
                postcodes=(from_postcode, to_postcode),
            )
        return measurement

    @staticmethod
    def _check_zone(checker: ZoneCheckerPort, postcode: str) -> bool:
        return bool(checker.contains(postcode))

    def _run_lookups(
        self,
        tasks: Dict[LookupKey, Callable[[], Any]],
        cancel_event: Optional[threading.Event],
    ) -> Dict[LookupKey, _Outcome]:
        """Run lookups concurrently and collect one outcome per task.

        Raises:
            RouteCancelledError: If cancel_event is set before the join finishes.
        """
        if cancel_event is not None and cancel_event.is_set():
            raise RouteCancelledError(
                "Route computation cancelled", pending_lookups=len(tasks)
            )

        outcomes: Dict[LookupKey, _Outcome] = {}
        timeout = float(self.config.lookup_timeout_seconds)  # type: ignore[arg-type]
        workers = max(1, min(self.config.max_workers, len(tasks)))
        started: Dict[LookupKey, float] = {}
        executor = ThreadPoolExecutor(
            max_workers=workers, thread_name_prefix="route-lookup"
        )
        try:
            futures: Dict[Future[Any], LookupKey] = {
                executor.submit(self._timed_call, started, key, fn): key
                for key, fn in tasks.items()
            }
            pending = set(futures)
            # Timed-out lookups; each holds a worker until its call returns
            abandoned: List[Future[Any]] = []

            while pending:
                if cancel_event is not None and cancel_event.is_set():
                    self._logger.info(
                        "Route computation cancelled",
                        extra={"pending_lookups": len(pending)},
                    )
                    raise RouteCancelledError(
                        "Route computation cancelled", pending_lookups=len(pending)
                    )

                done, pending = wait(
                    pending, timeout=_POLL_INTERVAL_SECONDS, return_when=FIRST_COMPLETED
                )
                for future in done:
                    key = futures[future]
                    try:
                        outcomes[key] = _Outcome(value=future.result())
                    except Exception as e:
                        outcomes[key] = _Outcome(error=e)
                        self._log_failure(key, e)

                # Each lookup's timeout runs from when a worker picked it up
                now = time.monotonic()
                for future in list(pending):
                    key = futures[future]
                    began = started.get(key)
                    if future.done() or began is None or now - began < timeout:
                        continue
                    pending.discard(future)
                    abandoned.append(future)
                    outcomes[key] = _Outcome(
                        error=self._timeout_error(key, f"Lookup timed out after {timeout:g}s")
                    )
                    self._log_failure(key, outcomes[key].error)

                stalled = sum(1 for f in abandoned if not f.done())
                if pending and stalled >= workers:
                    # Every worker is hung; queued lookups can never start
                    for future in pending:
                        key = futures[future]
                        outcomes[key] = _Outcome(
                            error=self._timeout_error(
                                key, "Lookup not started: all workers timed out"
                            )
                        )
                        self._log_failure(key, outcomes[key].error)
                    pending = set()
        finally:
            # Never wait on hung provider threads; drop anything still queued
            executor.shutdown(wait=False, cancel_futures=True)

        return outcomes

    @staticmethod
    def _timed_call(
        started: Dict[LookupKey, float], key: LookupKey, fn: Callable[[], Any]
    ) -> Any:
        started[key] = time.monotonic()
        return fn()

    @staticmethod
    def _timeout_error(key: LookupKey, message: str) -> ProviderError:
        return ProviderError(
            message,
            provider=key[0],
            postcodes=key[-1:] if key[0] == "zone" else key[1:],
            is_timeout=True,
        )

    def _log_failure(self, key: LookupKey, error: Optional[BaseException]) -> None:
        self._logger.warning(
            "Route lookup failed",
            extra={"lookup": repr(key), "error": str(error)},
        )

    # -- configuration --------------------------------------------------

    def _validate_config(self) -> None:
        for name in _REQUIRED_AMOUNTS:
            value = getattr(self.config, name)
            if value is None or value < 0:
                raise ConfigurationError(
                    f"Route setting {name!r} must be configured as a number >= 0, "
                    f"got {value!r}",
                    setting_name=f"route.{name}",
                    expected_type="float >= 0",
                )

        timeout = self.config.lookup_timeout_seconds
        if timeout is None or timeout <= 0:
            raise ConfigurationError(
                f"Route setting 'lookup_timeout_seconds' must be > 0, got {timeout!r}",
                setting_name="route.lookup_timeout_seconds",
                expected_type="float > 0",
            )
        if self.config.max_workers < 1:
            raise ConfigurationError(
                f"Route setting 'max_workers' must be >= 1, got {self.config.max_workers}",
                setting_name="route.max_workers",
                expected_type="int >= 1",
            )

        try:
            self._policy = ZoneChargePolicy(self.config.zone_charge_policy)
        except ValueError as e:
            raise ConfigurationError(
                f"Unknown zone charge policy {self.config.zone_charge_policy!r}",
                setting_name="route.zone_charge_policy",
                expected_type="per_unique_postcode | per_leg_endpoint",
                cause=e,
            )

        if self.config.base_postcode:
            try:
                self._default_base = Address(
                    label=self.config.base_label,
                    postcode=self.config.base_postcode,
                    role=AddressRole.BASE,
                )
            except ValidationError as e:
                raise ConfigurationError(
                    f"Configured base postcode {self.config.base_postcode!r} is invalid",
                    setting_name="route.base_postcode",
                    expected_type="UK postcode",
                    cause=e,
                )
