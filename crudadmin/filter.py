"""
Filter form types.

A filter form has two children: ``type``, the operator (e.g. "between"), and ``value``,
the operand. :any:`FilterType.create_view` describes the widgets to render and
:any:`FilterType.bind` turns submitted data back into Python values.
"""

from datetime import date, datetime
from logging import getLogger

from iso8601 import UTC, ParseError, parse_date

from .errors import InvalidFilterValue
from ._util import no_null_values

#: Translation domain of the operator labels.
TRANSLATION_DOMAIN = "CrudAdmin"

logger = getLogger(__name__)


class FormView(object):
  """Renderable description of a form: a dict of view variables and named child views."""

  def __init__(self, vars=None, children=None):
    # pylint: disable=redefined-builtin
    self.vars = vars if vars is not None else {}
    self.children = children if children is not None else {}

  def __repr__(self):
    return "FormView(vars=%r, children=%r)" % (self.vars, sorted(self.children))


class DateRange(object):
  """Bound value of a :any:`DateRangeType`. Either bound may be :samp:`None`."""

  def __init__(self, start=None, end=None):
    self.start = start
    self.end = end

  def is_empty(self):
    return self.start is None and self.end is None

  def __eq__(self, other):
    return isinstance(other, DateRange) and self.start == other.start and self.end == other.end

  def __ne__(self, other):
    # pylint: disable=unneeded-not
    return not self == other

  def __repr__(self):
    return "DateRange(start=%r, end=%r)" % (self.start, self.end)


class FilterType(object):
  """
  Base filter form type.

  Subclasses list their operators in :any:`operators` and may override
  :any:`build_value_view` and :any:`bind_value`.
  """

  #: Dict {label: value} of the operators this filter offers.
  operators = {}

  def __init__(self, translator=None):
    self.translator = translator
    """
    Optional callable :samp:`translator(message, domain)` used for operator labels.
    Labels are left untranslated without one.
    """

  def default_options(self):
    # pylint: disable=no-self-use
    return {
      "operator_type": "choice",
      "operator_options": {},
      "field_type": "text",
      "field_options": {},
      "label": None,
      "translation_domain": TRANSLATION_DOMAIN,
    }

  def configure_options(self, **overrides):
    """Defaults from :any:`default_options` updated with :samp:`overrides`."""
    options = self.default_options()
    unknown = set(overrides) - set(options)
    if unknown:
      raise TypeError("Unknown filter options: %s" % ", ".join(sorted(unknown)))
    options.update(overrides)
    return options

  def choices(self, translation_domain=TRANSLATION_DOMAIN):
    """Operator choices as {label: value}, labels translated if there is a translator."""
    if self.translator is None:
      return dict(self.operators)
    return dict((self.translator(label, translation_domain), value)
                for label, value in self.operators.items())

  def create_view(self, **options):
    options = self.configure_options(**options)

    type_vars = {
      "name": "type",
      "block_type": options["operator_type"],
      "required": False,
      "choices": self.choices(options["translation_domain"]),
    }
    type_vars.update(options["operator_options"])

    value_vars = {
      "name": "value",
      "block_type": options["field_type"],
      "required": True,
    }
    value_vars.update(options["field_options"])

    root_vars = no_null_values({
      "label": options["label"],
      "translation_domain": options["translation_domain"],
    })
    return FormView(root_vars, {
      "type": FormView(type_vars),
      "value": self.build_value_view(value_vars, options),
    })

  def build_value_view(self, value_vars, options):
    """View of the ``value`` child."""
    # pylint: disable=unused-argument, no-self-use
    return FormView(value_vars)

  def bind(self, data, **options):
    """
    Converts submitted data to ``{"type": operator, "value": value}``.

    :param data: Dict with optional ``type`` and ``value`` entries, as submitted.
    :raises InvalidFilterValue: if the operator or the value can not be bound.
    """
    options = self.configure_options(**options)
    data = data or {}
    bound = {
      "type": self._bind_operator(data.get("type")),
      "value": self.bind_value(data.get("value"), options),
    }
    logger.debug("%s bound %r to %r", self.__class__.__name__, data, bound)
    return bound

  def bind_value(self, raw, options):
    """Converts the submitted ``value`` child."""
    # pylint: disable=unused-argument, no-self-use
    return raw

  def _bind_operator(self, raw):
    if raw is None or raw == "":
      return None
    if isinstance(raw, int) and not isinstance(raw, bool):
      operator = raw
    elif isinstance(raw, str) and raw.isdecimal():
      operator = int(raw)
    else:
      raise InvalidFilterValue("type", "%r is not an operator." % (raw,))
    if operator not in self.operators.values():
      raise InvalidFilterValue("type", "Unknown operator %r." % operator)
    return operator


class DateRangeType(FilterType):
  """
  Filter on a range of dates. The value child has ``start`` and ``end`` children,
  bound as timezone-aware datetimes parsed from ISO 8601 strings.
  """

  TYPE_BETWEEN = 1
  TYPE_NOT_BETWEEN = 2

  operators = {
    "label_date_type_between": TYPE_BETWEEN,
    "label_date_type_not_between": TYPE_NOT_BETWEEN,
  }

  def default_options(self):
    options = super(DateRangeType, self).default_options()
    options["field_type"] = "date_range"
    options["default_timezone"] = UTC
    return options

  def build_value_view(self, value_vars, options):
    def bound_view(name):
      return FormView({"name": name, "block_type": "date", "required": value_vars["required"]})
    return FormView(value_vars, {"start": bound_view("start"), "end": bound_view("end")})

  def bind_value(self, raw, options):
    if not raw:
      return None

    if not isinstance(raw, dict):
      raise InvalidFilterValue("value", "Expected start and end, got %r." % (raw,))

    timezone = options["default_timezone"]
    start = _parse_bound("value.start", raw.get("start"), timezone)
    end = _parse_bound("value.end", raw.get("end"), timezone)

    if start is not None and end is not None and start > end:
      raise InvalidFilterValue("value", "Start %s is after end %s." % (start, end))
    return DateRange(start, end)


def _parse_bound(child, raw, timezone):
  if raw is None or raw == "":
    return None
  if isinstance(raw, datetime):
    return raw if raw.tzinfo is not None else raw.replace(tzinfo=timezone)
  if isinstance(raw, date):
    return datetime(raw.year, raw.month, raw.day, tzinfo=timezone)
  try:
    return parse_date(raw, default_timezone=timezone)
  except ParseError as exc:
    raise InvalidFilterValue(child, str(exc))
