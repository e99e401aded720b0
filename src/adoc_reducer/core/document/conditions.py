"""Condition evaluation for preprocessor conditionals.

Supported directives:
- ifdef::name[]      include content if ``name`` is set
- ifdef::a,b[]       include content if any of the attributes is set
- ifdef::a+b[]       include content if all of the attributes are set
- ifndef::...[]      the inverse of ifdef
- ifeval::[expr]     include content if ``lhs op rhs`` holds

Example usage:
    ifdef::env-github[]
    GitHub-only content
    endif::[]

    ifeval::[{sectnumlevels} >= 3]
    Deeply numbered content
    endif::[]
"""
from __future__ import annotations

import operator
import re
from typing import Any, Callable, Dict, MutableMapping, Optional

from .attributes import substitute_attributes


class ConditionEvaluator:
    """Decide whether a conditional directive skips its content.

    Evaluation reads the live document attributes, so a condition sees every
    attribute entry the parser consumed before the directive.
    """

    # lhs, comparison operator, rhs
    EVAL_EXPRESSION_PATTERN = re.compile(r"^(.+?)[ \t]*([=!><]=|[><])[ \t]*(.+)$")

    OPERATORS: Dict[str, Callable[[Any, Any], bool]] = {
        "==": operator.eq,
        "!=": operator.ne,
        "<": operator.lt,
        "<=": operator.le,
        ">": operator.gt,
        ">=": operator.ge,
    }

    def __init__(self, attributes: MutableMapping[str, Any]) -> None:
        """Initialize evaluator with the document attributes.

        Args:
            attributes: Live attribute mapping of the document
        """
        self.attributes = attributes
        self.functions: Dict[str, Callable[[str, Optional[str], Optional[str]], bool]] = {
            "ifdef": self._ifdef,
            "ifndef": self._ifndef,
            "ifeval": self._ifeval,
        }

    def should_skip(
        self,
        keyword: str,
        target: str,
        delimiter: Optional[str] = None,
        text: Optional[str] = None,
    ) -> bool:
        """Evaluate a conditional directive.

        Args:
            keyword: ``ifdef``, ``ifndef`` or ``ifeval``
            target: Attribute name(s) between ``::`` and ``[``
            delimiter: ``,`` or ``+`` when ``target`` names several attributes
            text: Content between the brackets

        Returns:
            True when the content governed by the directive must be skipped

        Raises:
            ValueError: If the directive is malformed
        """
        if keyword not in self.functions:
            raise ValueError(f"Unknown conditional directive: {keyword}")
        return self.functions[keyword](target, delimiter, text)

    def _ifdef(self, target: str, delimiter: Optional[str], text: Optional[str]) -> bool:
        names = self._names(target, delimiter, "ifdef", text)
        if delimiter == ",":
            return not any(name in self.attributes for name in names)
        if delimiter == "+":
            return not all(name in self.attributes for name in names)
        return names[0] not in self.attributes

    def _ifndef(self, target: str, delimiter: Optional[str], text: Optional[str]) -> bool:
        names = self._names(target, delimiter, "ifndef", text)
        if delimiter == ",":
            return any(name in self.attributes for name in names)
        if delimiter == "+":
            return all(name in self.attributes for name in names)
        return names[0] in self.attributes

    def _ifeval(self, target: str, delimiter: Optional[str], text: Optional[str]) -> bool:
        if target:
            raise ValueError(f"malformed preprocessor directive - target not permitted: ifeval::{target}[{text or ''}]")
        match = self.EVAL_EXPRESSION_PATTERN.match((text or "").strip())
        if not match:
            raise ValueError(f"malformed preprocessor directive - invalid expression: ifeval::[{text or ''}]")
        lhs = self._resolve_value(match.group(1))
        rhs = self._resolve_value(match.group(3))
        try:
            return not self.OPERATORS[match.group(2)](lhs, rhs)
        except TypeError:
            return True

    def _names(self, target: str, delimiter: Optional[str], keyword: str, text: Optional[str]) -> list[str]:
        if not target:
            raise ValueError(f"malformed preprocessor directive - missing target: {keyword}::[{text or ''}]")
        if delimiter:
            return [name.lower() for name in target.split(delimiter)]
        return [target.lower()]

    def _resolve_value(self, raw: str) -> Any:
        """Convert an ifeval operand into a comparable value."""
        raw = raw.strip()
        if len(raw) >= 2 and raw[0] == raw[-1] and raw[0] in ('"', "'"):
            return substitute_attributes(raw[1:-1], self.attributes, attribute_missing="drop", quiet=True) or ""
        value = substitute_attributes(raw, self.attributes, attribute_missing="drop", quiet=True) or ""
        value = value.strip()
        if not value:
            return None
        if value in ("true", "false"):
            return value == "true"
        if re.fullmatch(r"[-+]?\d+", value):
            return int(value)
        if re.fullmatch(r"[-+]?(?:\d+\.\d*|\.\d+)", value):
            return float(value)
        return value


__all__ = ["ConditionEvaluator"]
