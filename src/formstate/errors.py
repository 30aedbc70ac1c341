"""Configuration errors.

These signal programmer misuse (bad rule configuration, unknown or duplicate
field names) and are raised immediately at rule construction or field
registration. Validation failures are never raised; they are ValidationError
values attached to field states.
"""

from dataclasses import dataclass


class ConfigurationError(Exception):
    """Base class for all formstate configuration errors."""


class InvalidRuleError(ConfigurationError, ValueError):
    """A rule was constructed with malformed configuration."""

    def __init__(self, rule: str, reason: str):
        self.rule = rule
        self.reason = reason
        super().__init__(f"Invalid {rule} rule: {reason}")


class UnknownFieldError(ConfigurationError, KeyError):
    """A field name is not registered in the form."""

    def __init__(self, name: str, referenced_by: str | None = None):
        self.name = name
        self.referenced_by = referenced_by
        if referenced_by:
            message = f"Field '{referenced_by}' references unknown field '{name}'"
        else:
            message = f"Field '{name}' is not registered"
        super().__init__(message)

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0])


class DuplicateFieldError(ConfigurationError):
    """A field name was registered twice."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Field '{name}' is already registered")


class DuplicateOptionError(ConfigurationError):
    """Two options of a group field carry the same value."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Option {value!r} appears more than once in the group")


class UnknownOptionError(ConfigurationError, KeyError):
    """A group field has no option with the given value."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Group has no option {value!r}")

    def __str__(self) -> str:
        return str(self.args[0])


class UnknownRuleTypeError(ConfigurationError):
    """A rule definition names a type the registry does not know."""

    def __init__(self, rule_type: str, available: list[str]):
        self.rule_type = rule_type
        self.available = available
        super().__init__(
            f"Rule type '{rule_type}' is not registered. "
            "Available types: " + ", ".join(available)
        )


@dataclass
class DefinitionIssue:
    """A single problem found in a form definition document."""

    message: str
    path: str = ""  # e.g. "fields/email/rules[0]"

    def __str__(self) -> str:
        loc = f" at {self.path}" if self.path else ""
        return f"{self.message}{loc}"


class DefinitionError(ConfigurationError):
    """A form definition document is invalid."""

    def __init__(self, issues: list[DefinitionIssue], source: str | None = None):
        self.issues = issues
        self.source = source
        where = f" in {source}" if source else ""
        details = "; ".join(str(issue) for issue in issues)
        super().__init__(f"Invalid form definition{where}: {details}")
