"""Rule protocol and the ordered catalog the matcher queries."""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Iterable, Iterator, List, Optional, Protocol, Sequence, Tuple

from annotator.errors import CatalogError
from annotator.result import RawFinding
from annotator.severity import Severity

if TYPE_CHECKING:
    from annotator.lines import IndexedDocument


class Rule(Protocol):
    """Protocol implemented by all rule evaluators."""

    id: str
    title: str
    importance: Severity
    recommendation: str

    def evaluate(self, document: "IndexedDocument") -> Iterable[RawFinding]:
        """Return the findings for ``document``, anchored to line ranges."""


class RuleCatalog:
    """Immutable, ordered set of rules with unique identifiers.

    Registration order is the tie-breaker for rules of equal importance, so
    it is preserved everywhere the catalog is iterated or filtered.
    """

    def __init__(self, rules: Iterable[Rule] = ()) -> None:
        ordered: List[Rule] = []
        positions: Dict[str, int] = {}
        for rule in rules:
            rule_id = getattr(rule, "id", None)
            if not isinstance(rule_id, str) or not rule_id:
                raise CatalogError(f"Rule {rule!r} has no identifier")
            if rule_id in positions:
                raise CatalogError(f"Duplicate rule identifier: {rule_id}")
            positions[rule_id] = len(ordered)
            ordered.append(rule)
        self._rules: Tuple[Rule, ...] = tuple(ordered)
        self._positions = positions

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._positions

    def __repr__(self) -> str:
        return f"RuleCatalog({list(self.ids)!r})"

    @property
    def rules(self) -> Tuple[Rule, ...]:
        return self._rules

    @property
    def ids(self) -> Tuple[str, ...]:
        return tuple(rule.id for rule in self._rules)

    def get(self, rule_id: str) -> Optional[Rule]:
        position = self._positions.get(rule_id)
        return None if position is None else self._rules[position]

    def position(self, rule_id: str) -> int:
        try:
            return self._positions[rule_id]
        except KeyError:
            raise CatalogError(f"Unknown rule identifier: {rule_id}") from None

    def without(self, rule_ids: Iterable[str]) -> "RuleCatalog":
        """Return a catalog without ``rule_ids``, keeping the remaining order."""

        excluded = set(rule_ids)
        return RuleCatalog(rule for rule in self._rules if rule.id not in excluded)


def builtin_rules() -> List[Rule]:
    from .access_key import PlaintextAccessKeyRule
    from .env_secret import EnvSecretRule
    from .function_timeout import FunctionTimeoutRule
    from .iam_leastpriv import IamWildcardActionRule, IamWildcardResourceRule
    from .vpc_egress import OpenEgressCidrRule, VpcSecurityGroupRule

    return [
        PlaintextAccessKeyRule(),
        IamWildcardActionRule(),
        EnvSecretRule(),
        IamWildcardResourceRule(),
        OpenEgressCidrRule(),
        VpcSecurityGroupRule(),
        FunctionTimeoutRule(),
    ]


def load_catalog(enabled: Optional[Sequence[str]] = None, disabled: Iterable[str] = ()) -> RuleCatalog:
    """Build the built-in catalog, optionally narrowed to ``enabled`` ids.

    Unknown identifiers in either list raise ``CatalogError``. Narrowing never
    reorders rules.
    """

    catalog = RuleCatalog(builtin_rules())
    disabled = list(disabled)
    requested = list(enabled or ()) + disabled
    unknown = sorted({rule_id for rule_id in requested if rule_id not in catalog})
    if unknown:
        raise CatalogError(f"Unknown rule identifier(s): {', '.join(unknown)}")
    if enabled is not None:
        wanted = set(enabled)
        catalog = catalog.without(rule_id for rule_id in catalog.ids if rule_id not in wanted)
    return catalog.without(disabled)
