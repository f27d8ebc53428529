"""
Pair Generator - turns the participant list into cooking pairs.

Stages run in strict order and each removes the participants it matched:

1. Joint registrations are paired as declared.
2. Within each food preference, participants without a kitchen are matched with
   participants who have (or might have) one.
3. The remainder is sorted by age and drained pairwise across the kitchen divide, then
   leftover kitchen owners are paired among themselves at the kitchen nearer the party.

A final filter drops every pair at a kitchen that too many pairs would share.
"""

from __future__ import annotations

import logging
import math
from collections import Counter, deque
from collections.abc import Sequence

from spinfood.config import ConfigLoader
from spinfood.decision_log import DecisionLogger
from spinfood.geo import DistanceFunction, haversine_km
from spinfood.models import (
    FoodPreference,
    KitchenAvailability,
    Location,
    Pair,
    PairingResult,
    Participant,
)
from spinfood.preferences import resolve_pair_preference

logger = logging.getLogger(__name__)


class PairGenerator:
    """Generates cooking pairs from a static snapshot of participants."""

    def __init__(
        self,
        participants: Sequence[Participant],
        party_location: Location,
        config: ConfigLoader | None = None,
        distance: DistanceFunction = haversine_km,
        decision_logger: DecisionLogger | None = None,
    ):
        self.participants = list(participants)
        self.party_location = party_location
        self.config = config or ConfigLoader.get_instance()
        self.distance = distance
        self.decision_logger = decision_logger or DecisionLogger()

        self.max_pairs_per_kitchen = self.config.get_int("pairing.max_pairs_per_kitchen")

        self._pool: list[Participant] = []
        self._pairs: list[Pair] = []
        self._successors: list[Participant] = []
        self._next_pair_number = 1

    def generate_pairs(self) -> PairingResult:
        """Run all pairing stages once and return the surviving pairs and successors."""
        self._pool = list(self.participants)
        self._pairs = []
        self._successors = []
        self._next_pair_number = 1

        logger.info(f"Pairing {len(self._pool)} participants")

        self._pair_joint_registrations()
        self._pair_by_preference()
        self._pair_remainder()

        self._successors.extend(self._pool)
        for participant in self._pool:
            self.decision_logger.log_decision("pairing.unmatched", f"participant {participant.id} left unpaired")
        self._pool = []

        self._remove_pairs_with_high_kitchen_occupation()

        self.decision_logger.log_progress(
            f"Pairing finished: {len(self._pairs)} pairs, {len(self._successors)} successor participants"
        )
        return PairingResult(pairs=self._pairs, successor_participants=self._successors)

    # ------------------------------------------------------------------
    # Stage 1: joint registrations
    # ------------------------------------------------------------------

    def _pair_joint_registrations(self) -> None:
        by_id = {p.id: p for p in self._pool}
        consumed: set[str] = set()

        for declarer in [p for p in self._pool if p.partner_id is not None]:
            if declarer.id in consumed:
                continue
            consumed.add(declarer.id)

            partner = by_id.get(declarer.partner_id)  # type: ignore[arg-type]
            if partner is None or partner.id in consumed:
                reason = f"partner {declarer.partner_id} of {declarer.id} is not available"
                self._route_to_successors([declarer], reason)
                continue
            consumed.add(partner.id)

            if resolve_pair_preference(declarer.food_preference, partner.food_preference) is None:
                self._route_to_successors(
                    [declarer, partner],
                    f"joint registration {declarer.id} + {partner.id} mixes "
                    f"{declarer.food_preference.value} with {partner.food_preference.value}",
                )
                continue

            if declarer.has_kitchen:
                kitchen_supplier = False
            elif partner.has_kitchen:
                kitchen_supplier = True
            else:
                self._route_to_successors(
                    [declarer, partner], f"joint registration {declarer.id} + {partner.id} has no kitchen"
                )
                continue

            self._create_pair(
                declarer,
                partner,
                declarer.food_preference,
                kitchen_supplier=kitchen_supplier,
                joint_registration=True,
                stage="pairing.joint",
            )

        self._pool = [p for p in self._pool if p.id not in consumed]

    # ------------------------------------------------------------------
    # Stage 2: same preference, kitchen and no kitchen
    # ------------------------------------------------------------------

    def _pair_by_preference(self) -> None:
        matched: set[str] = set()

        for preference in FoodPreference:
            bucket = [p for p in self._pool if p.food_preference == preference]
            without_kitchen = [p for p in bucket if p.kitchen_availability == KitchenAvailability.NO]
            with_kitchen = [p for p in bucket if p.kitchen_availability == KitchenAvailability.YES]
            with_kitchen += [p for p in bucket if p.kitchen_availability == KitchenAvailability.MAYBE]

            for guest, host in zip(without_kitchen, with_kitchen, strict=False):
                self._create_pair(guest, host, guest.food_preference, kitchen_supplier=True, stage="pairing.preference")
                matched.update((guest.id, host.id))

        self._pool = [p for p in self._pool if p.id not in matched]

    # ------------------------------------------------------------------
    # Stage 3: remainder by age
    # ------------------------------------------------------------------

    def _pair_remainder(self) -> None:
        by_age = sorted(self._pool, key=lambda p: p.age)
        without_kitchen = deque(p for p in by_age if p.kitchen_availability == KitchenAvailability.NO)
        with_kitchen = deque(p for p in by_age if p.kitchen_availability != KitchenAvailability.NO)
        matched: set[str] = set()

        self._drain_across_kitchens(without_kitchen, with_kitchen, matched)

        while len(with_kitchen) >= 2:
            first = with_kitchen.popleft()
            second = with_kitchen.popleft()
            preference = resolve_pair_preference(first.food_preference, second.food_preference)
            if preference is None:
                self.decision_logger.log_decision(
                    "pairing.rejected", f"kitchen owners {first.id} + {second.id} have incompatible preferences"
                )
                continue

            kitchen_supplier = self._nearest_kitchen_is_second(first, second)
            self._create_pair(first, second, preference, kitchen_supplier=kitchen_supplier, stage="pairing.remainder")
            matched.update((first.id, second.id))

        self._pool = [p for p in self._pool if p.id not in matched]

    def _drain_across_kitchens(
        self,
        without_kitchen: deque[Participant],
        with_kitchen: deque[Participant],
        matched: set[str],
    ) -> None:
        """Pair queue fronts until one queue is empty or the rotation has come full circle.

        Both queues rotate in lockstep on a failed match, so after lcm(len_a, len_b) failures
        in a row every alignment has been tried and the queues are back where they started.
        """
        failures = 0
        while without_kitchen and with_kitchen:
            if failures >= math.lcm(len(without_kitchen), len(with_kitchen)):
                logger.debug(
                    f"Remainder pairing stalled with {len(without_kitchen)} guests "
                    f"and {len(with_kitchen)} kitchens left"
                )
                break

            guest = without_kitchen.popleft()
            host = with_kitchen.popleft()
            preference = resolve_pair_preference(guest.food_preference, host.food_preference)
            if preference is None:
                without_kitchen.append(guest)
                with_kitchen.append(host)
                failures += 1
                continue

            self._create_pair(guest, host, preference, kitchen_supplier=True, stage="pairing.remainder")
            matched.update((guest.id, host.id))
            failures = 0

    def _nearest_kitchen_is_second(self, first: Participant, second: Participant) -> bool:
        """True when the second participant's kitchen is strictly nearer to the party."""
        # Both come from the kitchen queue
        first_distance = self.distance(self.party_location, first.kitchen.location)  # type: ignore[union-attr]
        second_distance = self.distance(self.party_location, second.kitchen.location)  # type: ignore[union-attr]
        return second_distance < first_distance

    # ------------------------------------------------------------------
    # Kitchen occupation filter
    # ------------------------------------------------------------------

    def _remove_pairs_with_high_kitchen_occupation(self) -> None:
        occupation = Counter(pair.kitchen.location for pair in self._pairs)
        overloaded = {location for location, count in occupation.items() if count > self.max_pairs_per_kitchen}
        if not overloaded:
            return

        kept: list[Pair] = []
        for pair in self._pairs:
            if pair.kitchen.location in overloaded:
                self._successors.extend(pair.participants)
                self.decision_logger.log_decision(
                    "pairing.kitchen_occupation",
                    f"pair {pair.pair_number} dropped: kitchen at "
                    f"({pair.kitchen.location.latitude}, {pair.kitchen.location.longitude}) "
                    f"used by {occupation[pair.kitchen.location]} pairs",
                )
            else:
                kept.append(pair)

        logger.info(
            f"Kitchen occupation filter removed {len(self._pairs) - len(kept)} pairs "
            f"at {len(overloaded)} kitchens shared by more than {self.max_pairs_per_kitchen} pairs"
        )
        self._pairs = kept

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _create_pair(
        self,
        first: Participant,
        second: Participant,
        preference: FoodPreference,
        kitchen_supplier: bool,
        stage: str,
        joint_registration: bool = False,
    ) -> Pair:
        kitchen = second.kitchen if kitchen_supplier else first.kitchen
        pair = Pair(
            participant1=first,
            participant2=second,
            main_food_preference=preference,
            kitchen_supplier=kitchen_supplier,
            kitchen=kitchen,
            pair_number=self._next_pair_number,
            joint_registration=joint_registration,
        )
        self._next_pair_number += 1
        self._pairs.append(pair)
        self.decision_logger.log_decision(
            stage, f"pair {pair.pair_number}: {first.id} + {second.id} ({preference.value})"
        )
        return pair

    def _route_to_successors(self, participants: list[Participant], reason: str) -> None:
        self._successors.extend(participants)
        self.decision_logger.log_warning(reason)


def generate_pairs(
    participants: Sequence[Participant],
    party_location: Location,
    config: ConfigLoader | None = None,
    distance: DistanceFunction = haversine_km,
    decision_logger: DecisionLogger | None = None,
) -> PairingResult:
    """Convenience wrapper around PairGenerator for a single run."""
    generator = PairGenerator(
        participants,
        party_location,
        config=config,
        distance=distance,
        decision_logger=decision_logger,
    )
    return generator.generate_pairs()
