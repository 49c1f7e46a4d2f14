"""
Resolution engine for compound identification.

Coordinates an explicit, ordered list of resolution strategies:

  Tier 1: PubChem lookup (only when a fetch capability is supplied)
  Tier 2: Local fallback table (CAS -> exact synonym -> substring -> none)

Each strategy is a callable ``(key, steps) -> ResolutionOutcome | None``.
A strategy that raises or returns None hands over to the next one; remote
failures never escape the engine.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from reaction_analyzer.matching.fallback_matcher import FallbackMatcher
from reaction_analyzer.matching.pubchem_lookup import PubChemLookup, build_pubchem_urls
from reaction_analyzer.matching.types import (
    ChemicalEntry,
    ResolutionOutcome,
    ResolutionStatus,
    ResolvedEntry,
    extend,
)
from reaction_analyzer.normalization.cas_extractor import CASExtractor
from reaction_analyzer.remote.pubchem import PUBCHEM_BASE

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8


class ResolutionEngine:
    """
    Tiered, ambiguity-aware compound resolver.

    Resolution of a batch fans out over a thread pool (one task per entry)
    and fans back in preserving input order. Every entry gets its own
    immutable record; nothing is cached or shared between entries.
    """

    def __init__(self,
                 fetch: Optional[Callable[[str], Any]] = None,
                 fallback_matcher: Optional[FallbackMatcher] = None,
                 strategies: Optional[Sequence[Callable]] = None,
                 max_workers: int = DEFAULT_MAX_WORKERS,
                 base_url: str = PUBCHEM_BASE):
        """
        Initialize the resolution engine.

        Args:
            fetch: Remote lookup capability; None means fallback table only
            fallback_matcher: FallbackMatcher instance (creates new if None)
            strategies: Explicit strategy list (overrides fetch/fallback wiring)
            max_workers: Upper bound on concurrent entry resolutions
            base_url: PubChem PUG REST base URL
        """
        self.fetch = fetch
        self.base_url = base_url
        self.max_workers = max(1, int(max_workers))
        self.fallback_matcher = fallback_matcher or FallbackMatcher()
        self.cas_extractor = CASExtractor()

        if strategies is not None:
            self.strategies = list(strategies)
        else:
            self.strategies = []
            if fetch is not None:
                self.strategies.append(PubChemLookup(fetch, base_url=base_url))
            self.strategies.append(self.fallback_matcher)

    @property
    def has_remote(self) -> bool:
        return any(isinstance(s, PubChemLookup) for s in self.strategies)

    # ── Single identifier ────────────────────────────────────────────────

    def resolve(self, identifier: str, steps: Optional[list] = None) -> ResolutionOutcome:
        """
        Resolve one identifier through the strategy list.

        Args:
            identifier: CAS number, name/synonym or SMILES
            steps: Optional list receiving human-readable trace lines

        Returns:
            ResolutionOutcome (blank identifiers are not_found without
            suggestions and never reach any strategy)
        """
        if not identifier or not isinstance(identifier, str) or not identifier.strip():
            return ResolutionOutcome.not_found()

        key = identifier.strip()
        if steps is not None and not self.has_remote:
            steps.append("No fetch available: using the local fallback table.")

        for strategy in self.strategies:
            name = getattr(strategy, 'name', type(strategy).__name__)
            try:
                outcome = strategy(key, steps)
            except Exception as e:
                logger.warning(f"{name} lookup failed for '{key}': {e}")
                if steps is not None:
                    steps.append(
                        f"{name}: request for \"{key}\" failed, using next tier ({e})."
                    )
                continue

            if outcome is not None:
                return outcome

        # Only reachable with a custom strategy list lacking a fallback
        return ResolutionOutcome.not_found(
            row.canonical_name for row in self.fallback_matcher.table
        )

    # ── Batch resolution ─────────────────────────────────────────────────

    def resolve_entry(self, entry: ChemicalEntry, steps: Optional[list] = None) -> ResolvedEntry:
        """Resolve one entry by its lookup key and build its ResolvedEntry."""
        key = entry.lookup_key
        if steps is not None:
            steps.append(
                f"Chemical detected: {entry.identifier} (role: {entry.role.value}). "
                f"Looking up \"{key}\"."
            )
        return self.merge(entry, self.resolve(key, steps))

    def resolve_all(self, entries: Iterable[ChemicalEntry],
                    trace: Optional[list] = None) -> List[ResolvedEntry]:
        """
        Resolve every entry concurrently, preserving input order.

        Args:
            entries: Extracted entries
            trace: Optional list extended with each entry's trace lines,
                   grouped per entry in input order

        Returns:
            List of ResolvedEntry in the same order as ``entries``
        """
        entries = list(entries)
        if not entries:
            return []

        collect = trace is not None
        workers = min(self.max_workers, len(entries))

        def _task(entry: ChemicalEntry) -> Tuple[ResolvedEntry, list]:
            steps = [] if collect else None
            return self.resolve_entry(entry, steps), steps

        with ThreadPoolExecutor(max_workers=workers) as executor:
            results = list(executor.map(_task, entries))

        if collect:
            for _, steps in results:
                trace.extend(steps)

        resolved = [entry for entry, _ in results]
        logger.info(
            f"Resolved {sum(1 for e in resolved if e.status is ResolutionStatus.RESOLVED)}"
            f"/{len(resolved)} entries"
        )
        return resolved

    @staticmethod
    def merge(entry: ChemicalEntry, outcome: ResolutionOutcome) -> ResolvedEntry:
        """Copy ``entry`` into a ResolvedEntry carrying the outcome's fields."""
        if outcome.is_resolved:
            compound = outcome.compound
            return extend(
                ResolvedEntry, entry,
                canonical_name=compound.canonical_name,
                cas_number=compound.cas_number or entry.cas_number,
                smiles=entry.smiles or compound.smiles,
                molar_mass=compound.molar_mass,
                density=compound.density,
                boiling_point=compound.boiling_point,
                melting_point=compound.melting_point,
                solubility=compound.solubility,
                status=ResolutionStatus.RESOLVED,
                suggestions=(),
            )
        return extend(
            ResolvedEntry, entry,
            canonical_name=entry.identifier,
            status=outcome.status,
            suggestions=outcome.suggestions,
        )

    # ── Diagnostics ──────────────────────────────────────────────────────

    def debug_lookup(self, identifier: str) -> Dict[str, Any]:
        """
        Resolve a single identifier and report how it was interpreted.

        Returns:
            Dict with identifier, interpreted_as, urls, resolution, steps

        Raises:
            ValueError: If ``identifier`` is blank
        """
        key = (identifier or '').strip()
        if not key:
            raise ValueError("identifier required")

        steps = [f"Manual lookup for \"{key}\" started."]
        if self.cas_extractor.is_cas_format(key):
            interpreted_as = 'cas_number'
            checksum = 'valid' if self.cas_extractor.validate_cas(key) else 'invalid'
            steps.append(f"Input interpreted as CAS number (check digit {checksum}).")
        else:
            interpreted_as = 'name'
            steps.append("Input interpreted as name/synonym.")

        urls = build_pubchem_urls(key, self.base_url)
        steps.append(f"Property URL: {urls['property_url']}")
        steps.append(f"Record URL: {urls['record_url']}")

        outcome = self.resolve(key, steps)
        return {
            'identifier': key,
            'interpreted_as': interpreted_as,
            'urls': urls,
            'resolution': outcome.to_dict(),
            'steps': steps,
        }
