"""
Rule runner module.

Heuristic chains are expressed as ordered lists of named rules. Each rule
inspects the accumulated state and either decides or stays inconclusive;
the runner returns the first decision.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Generic, List, Optional, Sequence, TypeVar

logger = logging.getLogger(__name__)

StateT = TypeVar('StateT')


@dataclass(frozen=True)
class RuleOutcome:
    """
    Decision taken by a rule.

    Attributes:
        value: The decided value.
        rule_name: Name of the rule that decided.
    """
    value: Any
    rule_name: str


class Rule(ABC, Generic[StateT]):
    """
    A single named heuristic.

    Subclasses set ``name`` and implement ``evaluate``, returning None when
    the rule does not apply to the given state.
    """

    name: str = 'rule'

    @abstractmethod
    def evaluate(self, state: StateT) -> Optional[Any]:
        """
        Evaluate the rule.

        Args:
            state: Accumulated state of the chain.

        Returns:
            The decision, or None if inconclusive.
        """
        pass

    def __repr__(self) -> str:
        return f'<Rule {self.name}>'


class RuleRunner(Generic[StateT]):
    """
    Fixed-order rule evaluator.

    Example:
        >>> runner = RuleRunner('index', [SameValueRule(), KeepCurrentRule()])
        >>> outcome = runner.run(state)
        >>> outcome.rule_name
        'same_value'
    """

    def __init__(self, label: str, rules: Sequence[Rule[StateT]]):
        """
        Initialize the runner.

        Args:
            label: Chain name used in log messages.
            rules: Rules in evaluation order.
        """
        self._label = label
        self._rules: List[Rule[StateT]] = list(rules)

    @property
    def rule_names(self) -> List[str]:
        """Return the rule names in evaluation order."""
        return [rule.name for rule in self._rules]

    def run(self, state: StateT) -> Optional[RuleOutcome]:
        """
        Evaluate the rules in order.

        Args:
            state: Accumulated state handed to every rule.

        Returns:
            The first decision, or None if every rule was inconclusive.
        """
        for rule in self._rules:
            value = rule.evaluate(state)
            if value is not None:
                logger.debug(f'🧩 [{self._label}] 规则 {rule.name} 命中: {value}')
                return RuleOutcome(value=value, rule_name=rule.name)

        logger.debug(f'🧩 [{self._label}] 没有规则命中')
        return None
