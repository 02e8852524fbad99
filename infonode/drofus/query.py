"""
List-query builder for the dRofus REST API.

Renders OData-style query parameters:
    $select=id,article_id_number
    $filter=is_sub_occurrence eq true and model in ('A','B')

Example:
    >>> q = Query.list().select("id").filter(FilterItem("is_sub_occurrence", Comparison.EQ, True))
    >>> q.to_params()
    {'$select': 'id', '$filter': 'is_sub_occurrence eq true'}
"""

from enum import Enum


class Comparison(Enum):
    EQ = "eq"
    NE = "ne"
    GT = "gt"
    GE = "ge"
    LT = "lt"
    LE = "le"
    IN = "in"
    CONTAINS = "contains"


def format_literal(value):
    """Render one Python value as an OData literal."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    return "'{0}'".format(str(value).replace("'", "''"))


class FilterItem:
    """One filter clause: field <op> value."""

    __slots__ = ("field", "comparison", "value")

    def __init__(self, field, comparison, value):
        if not field:
            raise ValueError("FilterItem requires a field name")
        if not isinstance(comparison, Comparison):
            raise TypeError("comparison must be a Comparison (got {0!r})".format(comparison))
        if comparison is Comparison.IN:
            if isinstance(value, (str, bytes)) or not hasattr(value, "__iter__"):
                raise TypeError("IN filter on {0} needs a list of values".format(field))
            value = list(value)
        self.field = field
        self.comparison = comparison
        self.value = value

    @property
    def matches_nothing(self):
        return self.comparison is Comparison.IN and not self.value

    def render(self):
        op = self.comparison
        if op is Comparison.IN:
            return "{0} in ({1})".format(self.field, ",".join(format_literal(v) for v in self.value))
        if op is Comparison.CONTAINS:
            return "contains({0},{1})".format(self.field, format_literal(self.value))
        return "{0} {1} {2}".format(self.field, op.value, format_literal(self.value))

    def __repr__(self):
        return "FilterItem({0})".format(self.render())


class Query:
    """Chainable list query (select + AND-ed filters)."""

    def __init__(self):
        self.fields = []
        self.filters = []

    @classmethod
    def list(cls):
        return cls()

    def select(self, *fields):
        for f in fields:
            if f and f not in self.fields:
                self.fields.append(f)
        return self

    def filter(self, item):
        self.filters.append(item)
        return self

    def is_empty(self):
        """True when a filter can never match (e.g. IN over an empty list)."""
        return any(f.matches_nothing for f in self.filters)

    def to_params(self):
        params = {}
        if self.fields:
            params["$select"] = ",".join(self.fields)
        if self.filters:
            params["$filter"] = " and ".join(f.render() for f in self.filters)
        return params

    def __repr__(self):
        return "Query({0!r})".format(self.to_params())
