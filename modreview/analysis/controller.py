"""
Analysis controller - the single writer of per-item moderation state.

Flow for one item:
1. PENDING (or explicit re-run of COMPLETED/FAILED) -> ANALYZING, persisted
2. All applicable providers are called concurrently and joined
3. Each raw response is normalized; time-coded observations are associated
   with the admitted categories
4. Successful results are merged by the consensus engine
5. ANALYZING -> COMPLETED with the merged result, or -> FAILED when every
   provider failed or the analysis deadline passed; persisted

Automatic triggers (list load) only ever start PENDING items that have a
source locator. At most one analysis per item is in flight.
"""
import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from modreview.core.config import NormalizerThresholds, settings
from modreview.core.logging import get_logger
from modreview.fusion.associator import attach_timestamps
from modreview.fusion.consensus import ConsensusEngine
from modreview.items.models import ContentItem
from modreview.moderation.errors import (
    AllProvidersFailedError,
    NormalizationError,
    ProviderCallError,
)
from modreview.moderation.result import ModerationResult, ModerationState, ModerationStatus
from modreview.normalizers.registry import normalize_response
from modreview.providers.base import ProviderAdapter
from modreview.analysis.store import ModerationStore

logger = get_logger("analysis.controller")


@dataclass
class ProviderOutcome:
    """Outcome of one provider call for one item."""
    provider: str
    result: Optional[ModerationResult] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.result is not None


class AnalysisController:
    """
    Governs when analysis runs for a content item and owns its state.
    """

    def __init__(
        self,
        adapters: Sequence[ProviderAdapter],
        store: ModerationStore,
        thresholds: Optional[NormalizerThresholds] = None,
        engine: Optional[ConsensusEngine] = None,
        provider_timeout: Optional[float] = None,
        analysis_timeout: Optional[float] = None,
    ):
        """
        Args:
            adapters: Provider adapters to dispatch to
            store: Durable state store keyed by item id
            thresholds: Normalizer thresholds (default from settings)
            engine: Consensus engine
            provider_timeout: Seconds before one provider counts as failed
            analysis_timeout: Seconds before a whole analysis counts as failed
        """
        self.adapters = list(adapters)
        self.store = store
        self.thresholds = thresholds or NormalizerThresholds.from_settings()
        self.engine = engine or ConsensusEngine()
        self.provider_timeout = provider_timeout if provider_timeout is not None else settings.provider_timeout_sec
        self.analysis_timeout = analysis_timeout if analysis_timeout is not None else settings.analysis_timeout_sec
        self._in_flight: Set[str] = set()

    # =========================================================================
    # State
    # =========================================================================

    def is_in_flight(self, item_id: str) -> bool:
        return item_id in self._in_flight

    def _expired(self, state: ModerationState) -> bool:
        """True when an ANALYZING state has outlived the analysis deadline."""
        if state.status != ModerationStatus.ANALYZING:
            return False
        if not state.updated_at:
            return True
        started = datetime.fromisoformat(state.updated_at)
        if started.tzinfo is None:
            started = started.replace(tzinfo=timezone.utc)
        elapsed = (datetime.now(timezone.utc) - started).total_seconds()
        return elapsed > self.analysis_timeout

    async def refresh(self, item: ContentItem) -> ModerationState:
        """
        Load the stored state onto the item.

        A stale ANALYZING state (left behind by a crashed or abandoned run)
        is moved to FAILED so the item is never stuck.
        """
        state = await self.store.load(item.id)
        if item.id not in self._in_flight and self._expired(state):
            logger.warning(f"Item {item.id} stuck in analyzing past {self.analysis_timeout}s, marking failed")
            state.fail(f"Analysis did not finish within {self.analysis_timeout:g}s")
            await self.store.save(item.id, state)
        item.moderation = state
        return state

    def should_auto_analyze(self, item: ContentItem) -> bool:
        """Automatic triggers only start PENDING items with something to analyze."""
        return (
            item.moderation.status == ModerationStatus.PENDING
            and bool(item.source_locator)
            and item.id not in self._in_flight
        )

    # =========================================================================
    # Triggers
    # =========================================================================

    async def auto_analyze(self, items: Iterable[ContentItem]) -> Dict[str, ModerationState]:
        """
        Dispatch analysis for every eligible item (e.g. on list load).

        Items that are ANALYZING, COMPLETED or FAILED are left untouched.
        Returns the final state of each dispatched item.
        """
        dispatched: List[ContentItem] = []
        for item in items:
            await self.refresh(item)
            if self.should_auto_analyze(item):
                dispatched.append(item)

        if not dispatched:
            return {}

        logger.info(f"Auto-analyzing {len(dispatched)} item(s)")
        outcomes = await asyncio.gather(
            *(self.analyze(item) for item in dispatched),
            return_exceptions=True,
        )

        states: Dict[str, ModerationState] = {}
        for item, outcome in zip(dispatched, outcomes):
            if isinstance(outcome, BaseException):
                logger.error(f"Analysis of item {item.id} raised: {outcome}")
                continue
            states[item.id] = outcome
        return states

    async def reanalyze(self, item: ContentItem) -> ModerationState:
        """User-initiated "run analysis again"."""
        return await self.analyze(item, explicit=True)

    async def analyze(self, item: ContentItem, explicit: bool = False) -> ModerationState:
        """
        Run analysis for one item.

        A second trigger while the item is in flight is a no-op, as is an
        automatic trigger for an item that is no longer PENDING.
        """
        if item.id in self._in_flight:
            logger.info(f"Analysis already in flight for item {item.id}, ignoring trigger")
            return item.moderation
        self._in_flight.add(item.id)

        try:
            state = await self.store.load(item.id)
            if self._expired(state):
                state.fail(f"Analysis did not finish within {self.analysis_timeout:g}s")
            if not state.can_transition(ModerationStatus.ANALYZING, explicit):
                logger.info(f"Item {item.id} is {state.status.value}, skipping analysis")
                item.moderation = state
                return state

            state.begin(explicit)
            item.moderation = state
            await self.store.save(item.id, state)
            logger.info(f"Item {item.id}: {'re-' if explicit else ''}analysis started")

            try:
                result, provider_errors = await asyncio.wait_for(
                    self._run_providers(item), timeout=self.analysis_timeout
                )
            except asyncio.TimeoutError:
                logger.error(f"Item {item.id}: analysis timed out after {self.analysis_timeout}s")
                state.fail(f"Analysis did not finish within {self.analysis_timeout:g}s")
            except AllProvidersFailedError as e:
                logger.warning(f"Item {item.id}: {e}")
                state.fail(str(e), e.errors)
            else:
                state.complete(result, provider_errors)
                logger.info(
                    f"Item {item.id}: analysis completed "
                    f"(flagged={result.flagged}, categories={result.categories})"
                )

            item.moderation = state
            await self.store.save(item.id, state)
            return state
        finally:
            self._in_flight.discard(item.id)

    # =========================================================================
    # Provider dispatch
    # =========================================================================

    async def _run_providers(self, item: ContentItem) -> Tuple[ModerationResult, Dict[str, str]]:
        """
        Call all applicable providers concurrently and merge their results.

        Raises:
            AllProvidersFailedError: if no provider produced a result
        """
        adapters = [a for a in self.adapters if a.applies_to(item)]
        if not adapters:
            raise AllProvidersFailedError(item.id, {})

        outcomes = await asyncio.gather(*(self._call_provider(a, item) for a in adapters))

        results = [o.result for o in outcomes if o.ok]
        errors = {o.provider: o.error for o in outcomes if not o.ok}
        if not results:
            raise AllProvidersFailedError(item.id, errors)

        return self.engine.merge(results), errors

    async def _call_provider(self, adapter: ProviderAdapter, item: ContentItem) -> ProviderOutcome:
        """Call one provider; any failure is captured, never raised."""
        provider = adapter.provider_id
        try:
            raw = await asyncio.wait_for(adapter.analyze(item), timeout=self.provider_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"{provider} timed out after {self.provider_timeout}s for item {item.id}")
            return ProviderOutcome(provider, error=f"timed out after {self.provider_timeout:g}s")
        except ProviderCallError as e:
            logger.warning(f"{provider} call failed for item {item.id}: {e}")
            return ProviderOutcome(provider, error=str(e))
        except Exception as e:
            logger.exception(f"{provider} adapter raised unexpectedly for item {item.id}")
            return ProviderOutcome(provider, error=f"unexpected error: {e}")

        try:
            result = self.normalize(provider, raw)
        except NormalizationError as e:
            logger.warning(f"Could not normalize {provider} response for item {item.id}: {e}")
            return ProviderOutcome(provider, error=str(e))

        return ProviderOutcome(provider, result=result)

    def normalize(self, provider: str, raw) -> ModerationResult:
        """Normalize a raw response and associate its time-coded observations."""
        result = normalize_response(provider, raw, self.thresholds)
        if result.timestamps is not None:
            result = attach_timestamps(result, result.timestamps)
        return result
