from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..errors import RosterError, UnsatisfiableConstraintError
from ..models.group import Group
from ..models.participant import AvoidConstraint, Participant
from ..rules import HardRule, Rule, SoftRule, default_rules
from ..rules.gender import GenderCounts, can_maintain_balance, is_valid_gender_balance

logger = logging.getLogger(__name__)

MIN_PARTICIPANTS = 4
SINGLE_GROUP_MAX = 9
ALLOWED_TARGET_SIZES = (5, 6)
DEFAULT_TARGET_SIZE = 6
DEFAULT_LENIENT_ATTEMPTS = 20

INSUFFICIENT = "insufficient_participants"
SINGLE_GROUP = "single_group"
STRICT = "strict"
LENIENT = "lenient"

Rationales = Dict[Tuple[str, str], str]


@dataclass
class FormationResult:
    """Outcome of one group formation run.

    ``status`` tells the caller which path produced the groups. An
    ``insufficient_participants`` result carries no groups and means the
    event should be postponed.
    """

    status: str
    groups: List[Group] = field(default_factory=list)
    rationales: Rationales = field(default_factory=dict)
    forced_placements: int = 0
    warnings: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.groups


@dataclass
class _LenientOutcome:
    buckets: List[List[Participant]]
    notes: Dict[str, str]
    forced: int
    oversize: int = 0

    @property
    def rank(self) -> Tuple[int, int]:
        return self.oversize, self.forced


class AvoidIndex:
    """Fast lookup over avoid-pair constraints."""

    def __init__(self, constraints: Iterable[AvoidConstraint]) -> None:
        self._partners: Dict[str, set] = {}
        for constraint in constraints:
            a, b = constraint.participant_id_a, constraint.participant_id_b
            self._partners.setdefault(a, set()).add(b)
            self._partners.setdefault(b, set()).add(a)

    def degree(self, participant_id: str) -> int:
        return len(self._partners.get(participant_id, ()))

    def conflicts(self, participant_id: str, members: Iterable[Participant]) -> bool:
        partners = self._partners.get(participant_id)
        if not partners:
            return False
        return any(member.id in partners for member in members)

    def violations(self, members: Sequence[Participant]) -> List[Tuple[str, str]]:
        pairs = []
        for index, member in enumerate(members):
            for other in members[index + 1:]:
                if other.id in self._partners.get(member.id, ()):
                    pairs.append((member.id, other.id))
        return pairs


def group_name(index: int) -> str:
    return f"Group {index + 1}"


def plan_group_sizes(count: int, target_size: int) -> List[int]:
    """Split ``count`` participants into group sizes around ``target_size``.

    ``ceil(count / target_size)`` groups are used, reduced where needed so
    that every size stays within one of the target; the first
    ``count % groups`` groups receive one extra member.
    """
    num_groups = math.ceil(count / target_size)
    num_groups = max(1, min(num_groups, count // (target_size - 1)))
    base, extra = divmod(count, num_groups)
    return [base + (1 if index < extra else 0) for index in range(num_groups)]


def _balance_enforced(roster: Sequence[Participant]) -> bool:
    """Balance applies only when the roster has both men and women."""
    counts = GenderCounts.of(roster)
    return counts.male > 0 and counts.female > 0


def _fits_balance(members: List[Participant], candidate: Participant, size: int) -> bool:
    grown = members + [candidate]
    return can_maintain_balance(GenderCounts.of(grown), size - len(grown), size)


class GroupFormer:
    """Partition a roster into dinner groups.

    Rosters of ten or more go through two independent passes chained by
    :func:`generate_groups`:
    1. a strict greedy pass that enforces every hard rule and aborts on the
       first dead end
    2. a lenient pass that only enforces avoid pairs and gender balance
       feasibility
    The strict pass walks participants in ascending id order, so seeds and
    score ties resolve to the lowest id. Ids compare as strings, so
    ``"p10"`` sorts before ``"p9"``; zero-pad numeric ids to get numeric
    order.
    """

    @staticmethod
    def validate_roster(roster: Sequence[Participant], target_size: int) -> None:
        if target_size not in ALLOWED_TARGET_SIZES:
            raise RosterError(
                f"Target group size must be one of {ALLOWED_TARGET_SIZES}, got {target_size}"
            )
        seen = set()
        for participant in roster:
            if participant.id in seen:
                raise RosterError(f"Participant {participant.id} appears twice in the roster")
            seen.add(participant.id)

    @staticmethod
    def try_strict(
        roster: Sequence[Participant],
        constraints: Iterable[AvoidConstraint],
        sizes: Sequence[int],
        rules: Optional[Sequence[Rule]] = None,
    ) -> Optional[Tuple[List[List[Participant]], Rationales]]:
        """Greedy strict pass; returns ``None`` instead of partial groups."""
        rules = list(rules) if rules is not None else default_rules()
        hard = [r for r in rules if isinstance(r, HardRule)]
        soft = [r for r in rules if isinstance(r, SoftRule)]
        avoid = AvoidIndex(constraints)
        balance = _balance_enforced(roster)
        ordered = sorted(roster, key=lambda p: p.id)
        used = set()
        buckets: List[List[Participant]] = []
        rationales: Rationales = {}

        for index, size in enumerate(sizes):
            name = group_name(index)
            seed = next((p for p in ordered if p.id not in used), None)
            if seed is None:
                return None
            members = [seed]
            used.add(seed.id)
            rationales[(name, seed.id)] = "Seed participant"

            while len(members) < size:
                best: Optional[Participant] = None
                best_score = 0.0
                best_notes: List[str] = []
                for candidate in ordered:
                    if candidate.id in used:
                        continue
                    if avoid.conflicts(candidate.id, members):
                        continue
                    if not all(rule.check(candidate, members) for rule in hard):
                        continue
                    if balance and not _fits_balance(members, candidate, size):
                        continue
                    evaluations = [rule.evaluate(candidate, members) for rule in soft]
                    score = sum(value for value, _ in evaluations)
                    if best is None or score > best_score:
                        best, best_score = candidate, score
                        best_notes = [note for _, note in evaluations]
                if best is None:
                    logger.info(
                        "Strict mode: no eligible candidate for %s after %d of %d members",
                        name,
                        len(members),
                        size,
                    )
                    return None
                members.append(best)
                used.add(best.id)
                rationales[(name, best.id)] = (
                    f"Candidate score {best_score:g} ({'; '.join(best_notes)})"
                    if best_notes
                    else f"Candidate score {best_score:g}"
                )
                logger.debug("Strict mode: %s joins %s (score %g)", best.id, name, best_score)

            if balance and not is_valid_gender_balance(GenderCounts.of(members)):
                logger.info("Strict mode: %s ended without gender balance", name)
                return None
            buckets.append(members)

        return buckets, rationales

    @staticmethod
    def _lenient_pass(
        order: Sequence[Participant],
        avoid: AvoidIndex,
        sizes: Sequence[int],
        balance: bool,
    ) -> Optional[_LenientOutcome]:
        buckets: List[List[Participant]] = [[] for _ in sizes]
        notes: Dict[str, str] = {}
        forced = 0
        oversize = 0

        for participant in order:
            avoid_free = [
                i for i in range(len(sizes)) if not avoid.conflicts(participant.id, buckets[i])
            ]
            open_slots = [i for i in avoid_free if len(buckets[i]) < sizes[i]]
            eligible = [
                i
                for i in open_slots
                if not balance or _fits_balance(buckets[i], participant, sizes[i])
            ]
            if eligible:
                target = min(eligible, key=lambda i: len(buckets[i]))
                note = "Placed in the smallest eligible group"
            elif open_slots:
                target = min(open_slots, key=lambda i: len(buckets[i]))
                note = "Forced: gender balance relaxed"
                forced += 1
            elif avoid_free:
                target = min(avoid_free, key=lambda i: len(buckets[i]))
                note = "Forced: placed above target size"
                forced += 1
                oversize += 1
            else:
                return None
            buckets[target].append(participant)
            notes[participant.id] = note
            logger.debug("Lenient mode: %s -> %s (%s)", participant.id, group_name(target), note)

        if any(len(bucket) < MIN_PARTICIPANTS for bucket in buckets):
            logger.debug("Lenient mode: attempt left a group below %d members", MIN_PARTICIPANTS)
            return None
        return _LenientOutcome(buckets=buckets, notes=notes, forced=forced, oversize=oversize)

    @staticmethod
    def lenient_fallback(
        roster: Sequence[Participant],
        constraints: Iterable[AvoidConstraint],
        sizes: Sequence[int],
        rng: Optional[random.Random] = None,
        attempts: int = DEFAULT_LENIENT_ATTEMPTS,
    ) -> Tuple[List[List[Participant]], Rationales, int]:
        """Shuffle-and-place pass that never co-locates an avoid pair.

        Up to ``attempts`` shuffles are tried. Participants with the most
        avoid partners are placed first within each shuffle. The first
        attempt that needs no forced placement wins; otherwise the one with
        the fewest over-size placements, then the fewest forced placements,
        is returned. An attempt leaving any group below
        :data:`MIN_PARTICIPANTS` members is discarded.
        """
        rng = rng or random.Random()
        avoid = AvoidIndex(constraints)
        balance = _balance_enforced(roster)
        best: Optional[_LenientOutcome] = None

        for _ in range(max(1, attempts)):
            order = sorted(roster, key=lambda p: p.id)
            rng.shuffle(order)
            order.sort(key=lambda p: avoid.degree(p.id), reverse=True)
            outcome = GroupFormer._lenient_pass(order, avoid, sizes, balance)
            if outcome is None:
                continue
            if outcome.forced == 0:
                best = outcome
                break
            if best is None or outcome.rank < best.rank:
                best = outcome

        if best is None:
            raise UnsatisfiableConstraintError(
                "Avoid constraints leave no grouping that keeps every pair apart "
                f"with at least {MIN_PARTICIPANTS} members per group"
            )
        if best.forced:
            logger.warning("Lenient mode needed %d forced placement(s)", best.forced)
        buckets = [bucket for bucket in best.buckets if bucket]
        rationales = {
            (group_name(index), participant.id): best.notes[participant.id]
            for index, bucket in enumerate(buckets)
            for participant in bucket
        }
        return buckets, rationales, best.forced

    @staticmethod
    def package_result(
        status: str,
        buckets: Sequence[Sequence[Participant]],
        rationales: Rationales,
        forced: int = 0,
        warnings: Optional[List[str]] = None,
    ) -> FormationResult:
        groups = [
            Group(list(members), name=group_name(index))
            for index, members in enumerate(buckets)
        ]
        return FormationResult(
            status=status,
            groups=groups,
            rationales=dict(rationales),
            forced_placements=forced,
            warnings=list(warnings or []),
        )


def generate_groups(
    roster: Sequence[Participant],
    constraints: Iterable[AvoidConstraint] = (),
    target_size: int = DEFAULT_TARGET_SIZE,
    rules: Optional[Sequence[Rule]] = None,
    rng: Optional[random.Random] = None,
    lenient_attempts: int = DEFAULT_LENIENT_ATTEMPTS,
) -> FormationResult:
    """Form dinner groups for one event.

    Fewer than four participants yields an empty ``insufficient_participants``
    result. Four to nine participants form a single group. Larger rosters are
    split by the strict pass, falling back to the lenient pass.
    """
    roster = list(roster)
    constraints = list(constraints)
    GroupFormer.validate_roster(roster, target_size)
    count = len(roster)

    if count < MIN_PARTICIPANTS:
        logger.warning(
            "Not enough participants (%d); minimum is %d, event should be postponed",
            count,
            MIN_PARTICIPANTS,
        )
        return FormationResult(status=INSUFFICIENT)

    if count <= SINGLE_GROUP_MAX:
        logger.info("%d participants: creating a single group", count)
        warnings = []
        if not is_valid_gender_balance(GenderCounts.of(roster)):
            warnings.append("Gender balance is not attainable for the single group")
        for a, b in AvoidIndex(constraints).violations(roster):
            warnings.append(f"Avoid pair {a}/{b} shares the single group")
        for warning in warnings:
            logger.warning(warning)
        rationales = {(group_name(0), p.id): "Single group for a small event" for p in roster}
        return GroupFormer.package_result(SINGLE_GROUP, [roster], rationales, warnings=warnings)

    sizes = plan_group_sizes(count, target_size)
    logger.info("%d participants: planning %d groups of sizes %s", count, len(sizes), sizes)

    strict = GroupFormer.try_strict(roster, constraints, sizes, rules)
    if strict is not None:
        buckets, rationales = strict
        logger.info("Strict mode succeeded with %d groups", len(buckets))
        return GroupFormer.package_result(STRICT, buckets, rationales)

    logger.info("Strict mode infeasible, falling back to lenient placement")
    buckets, rationales, forced = GroupFormer.lenient_fallback(
        roster, constraints, sizes, rng=rng, attempts=lenient_attempts
    )
    logger.info("Lenient mode generated %d groups", len(buckets))
    return GroupFormer.package_result(LENIENT, buckets, rationales, forced=forced)
