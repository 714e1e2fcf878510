"""
Dynamic pricing rule engine.

Rules are kept in registration order and folded multiplicatively: a fare's
rule multiplier is the product of the multipliers of every active rule whose
route pattern and hour range both match, starting from 1.0.
"""

import logging
from typing import Iterable, List, Optional, Tuple
from uuid import UUID

from ..errors import NotFoundError
from ..models.admin import PricingRuleModel

logger = logging.getLogger(__name__)


def default_pricing_rules(created_by: UUID) -> List[PricingRuleModel]:
    """Rules registered on a fresh start."""
    return [
        PricingRuleModel(
            rule_name="Peak Hours Premium",
            time_period=(6, 9),
            multiplier=1.3,
            created_by=created_by,
        ),
        PricingRuleModel(
            rule_name="Weekend Discount",
            multiplier=0.9,
            created_by=created_by,
        ),
        PricingRuleModel(
            rule_name="Transatlantic Premium",
            route_pattern="*-LHR",
            multiplier=1.2,
            created_by=created_by,
        ),
    ]


class PricingEngine:
    """
    Ordered collection of pricing rules.

    The engine holds no other state; enabling, disabling and removing rules
    only changes which multipliers take part in the fold.
    """

    def __init__(self, rules: Optional[Iterable[PricingRuleModel]] = None):
        self._rules: List[PricingRuleModel] = list(rules or [])

    @property
    def rules(self) -> List[PricingRuleModel]:
        return list(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def get_rule(self, rule_id: UUID) -> PricingRuleModel:
        for rule in self._rules:
            if rule.id == rule_id:
                return rule
        raise NotFoundError("Pricing rule", rule_id)

    def add_rule(self, rule: PricingRuleModel) -> PricingRuleModel:
        self._rules.append(rule)
        logger.debug(f"Pricing rule registered: {rule.rule_name} (x{rule.multiplier})")
        return rule

    def set_active(self, rule_id: UUID, is_active: bool) -> Tuple[bool, PricingRuleModel]:
        """Toggle a rule; returns the previous flag and the rule."""
        rule = self.get_rule(rule_id)
        previous = rule.is_active
        rule.is_active = is_active
        return previous, rule

    def remove_rule(self, rule_id: UUID) -> PricingRuleModel:
        rule = self.get_rule(rule_id)
        self._rules.remove(rule)
        return rule

    def matching_rules(self, origin: str, destination: str, hour: int) -> List[PricingRuleModel]:
        return [
            rule
            for rule in self._rules
            if rule.is_active
            and rule.applies_to_route(origin, destination)
            and rule.applies_to_time(hour)
        ]

    def applicable_multiplier(self, origin: str, destination: str, hour: int) -> float:
        multiplier = 1.0
        for rule in self.matching_rules(origin, destination, hour):
            multiplier *= rule.multiplier
        return multiplier
