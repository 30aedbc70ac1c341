"""Built-in rules.

Every rule is a callable `(value, context) -> ValidationError | None`. The
snake_case factories are the intended way to build them; the classes are
exported for isinstance checks and subclassing.
"""

from formstate.rules.base import BaseRule, values_equal
from formstate.rules.constraints import (
    EMAIL_PATTERN,
    URL_PATTERN,
    Email,
    InList,
    Integer,
    IsFalse,
    IsTrue,
    MaxLength,
    MaxValue,
    MinLength,
    MinValue,
    NotInList,
    Numeric,
    Regex,
    Required,
    Size,
    Url,
    email,
    in_list,
    integer,
    is_false,
    is_true,
    max_length,
    max_value,
    min_length,
    min_value,
    not_in_list,
    numeric,
    regex,
    required,
    size,
    url,
)
from formstate.rules.cross_field import FILLED, RequiredIf, Same, required_if, same
from formstate.rules.dates import UNPARSABLE_CODE, DateAfter, DateBefore, date_after, date_before
from formstate.rules.selection import (
    MaxSelected,
    MinSelected,
    RangeSelected,
    max_selected,
    min_selected,
    range_selected,
)

__all__ = [
    # Base
    "BaseRule",
    "values_equal",
    "EMAIL_PATTERN",
    "URL_PATTERN",
    "FILLED",
    "UNPARSABLE_CODE",
    # Classes
    "DateAfter",
    "DateBefore",
    "Email",
    "InList",
    "Integer",
    "IsFalse",
    "IsTrue",
    "MaxLength",
    "MaxSelected",
    "MaxValue",
    "MinLength",
    "MinSelected",
    "MinValue",
    "NotInList",
    "Numeric",
    "RangeSelected",
    "Regex",
    "Required",
    "RequiredIf",
    "Same",
    "Size",
    "Url",
    # Factories
    "date_after",
    "date_before",
    "email",
    "in_list",
    "integer",
    "is_false",
    "is_true",
    "max_length",
    "max_selected",
    "max_value",
    "min_length",
    "min_selected",
    "min_value",
    "not_in_list",
    "numeric",
    "range_selected",
    "regex",
    "required",
    "required_if",
    "same",
    "size",
    "url",
]
