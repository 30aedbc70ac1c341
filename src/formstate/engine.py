"""Validation engine.

Runs an ordered rule chain against a value. Evaluation is fail-fast: the
first rule that produces a message wins and later rules are not called.
Declaration order is therefore part of a field's behaviour: reordering rules
changes which message is shown when several would fail.
"""

import logging
from typing import TYPE_CHECKING, Any, Iterable

from formstate.types import Rule, ValidationError

if TYPE_CHECKING:
    from formstate.context import FormContext

logger = logging.getLogger(__name__)

CUSTOM_CODE = "CUSTOM"


def normalize_result(result: Any, rule: Rule) -> ValidationError | None:
    """Coerce a rule's return value into a ValidationError or None.

    Raises:
        TypeError: If the rule returned something other than
            ValidationError, str or None
    """
    if result is None:
        return None
    if isinstance(result, ValidationError):
        return result
    if isinstance(result, str):
        return ValidationError(message=result, code=CUSTOM_CODE) if result else None
    raise TypeError(
        f"Rule {rule!r} returned {type(result).__name__}; "
        "expected ValidationError, str or None"
    )


class ValidationEngine:
    """Evaluates rule chains.

    The engine holds no state; each call is a single pure pass over the
    rules. Exceptions raised by a rule propagate to the caller.
    """

    @classmethod
    def run(
        cls,
        value: Any,
        rules: Iterable[Rule],
        context: "FormContext",
    ) -> ValidationError | None:
        """Return the first failing rule's message, or None if all pass.

        Args:
            value: The value under validation
            rules: Rules in declaration order
            context: Form snapshot for cross-field rules

        Returns:
            The first ValidationError produced, or None
        """
        for index, rule in enumerate(rules):
            error = cls._evaluate(rule, index, value, context)
            if error is not None:
                logger.debug("Rule %d %r failed with %s", index, rule, error.code)
                return error
        return None

    @classmethod
    def run_all(
        cls,
        value: Any,
        rules: Iterable[Rule],
        context: "FormContext",
    ) -> list[ValidationError]:
        """Return every failing rule's message, in declaration order.

        For UIs that list all problems at once. A field's `error` always uses
        `run`.
        """
        errors: list[ValidationError] = []
        for index, rule in enumerate(rules):
            error = cls._evaluate(rule, index, value, context)
            if error is not None:
                errors.append(error)
        return errors

    @staticmethod
    def _evaluate(
        rule: Rule,
        index: int,
        value: Any,
        context: "FormContext",
    ) -> ValidationError | None:
        try:
            result = rule(value, context)
        except Exception:
            logger.debug("Rule %d %r raised", index, rule, exc_info=True)
            raise
        return normalize_result(result, rule)
