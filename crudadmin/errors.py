"""Error types that crudadmin raises."""


class CrudAdminError(Exception):
  """Base class for every error raised by crudadmin."""
  pass


class NoValueError(CrudAdminError):
  """
  No resolution strategy could read a value for a field path.

  Renderers are expected to catch this and show an empty value instead.
  """

  def __init__(self, field_path, target, reason=None):
    self.field_path = field_path
    """The field path (or path segment) that could not be resolved."""
    self.target_type = type(target)
    """Type of the object the value was read from."""
    message = "Neither an accessor, a getter nor an attribute resolves %r on %s." % (
      field_path, self.target_type.__name__)
    if reason is not None:
      message = "%s %s" % (message, reason)
    super(NoValueError, self).__init__(message)


class InvalidOptionMerge(CrudAdminError, RuntimeError):
  """Tried to merge a sequence into an option holding a non-sequence value."""

  def __init__(self, key, current):
    self.key = key
    """Name of the option."""
    super(InvalidOptionMerge, self).__init__(
      "The key %r does not point to a sequence value (got %s)." % (key, type(current).__name__))


class InvalidFilterValue(CrudAdminError, ValueError):
  """Submitted filter data could not be bound."""

  def __init__(self, child, description):
    self.child = child
    """Name of the form child holding the bad value."""
    super(InvalidFilterValue, self).__init__("%s: %s" % (child, description))
