""":any:`BaseFieldDescription` and the field value resolver."""

import re
from abc import abstractmethod
from logging import getLogger
from os import environ

from .deprecated import warn_deprecated
from .errors import InvalidOptionMerge, NoValueError
from ._util import is_sequence

#: Placeholder option used when none is configured.
DEFAULT_PLACEHOLDER = "short_object_description_placeholder"

_MISSING = object()

# Cache scopes: a leaf may win through custom strategies, a path segment never does.
_LEAF = "leaf"
_PATH = "path"

# Values a dotted path cannot descend into.
_SCALAR_TYPES = (str, bytes, int, float, complex, bool, list, tuple, dict, set, frozenset)

# Options whose change invalidates remembered strategies.
_STRATEGY_OPTIONS = ("accessor", "code", "parameters")


def camelize(value):
  """
  Converts a snake_case or space separated string to PascalCase.
  e.g. :samp:`camelize("foo_bar")` and :samp:`camelize("foo bar")` are both ``"FooBar"``.

  Only the first letter of each word changes case, so ``"fOo bar"`` becomes ``"FOoBar"``.
  """
  return "".join(word[:1].upper() + word[1:] for word in re.split(r"[_ ]+", value))


def snake_case(value):
  """Opposite of :any:`camelize`: ``"fakeFieldValue"`` becomes ``"fake_field_value"``."""
  value = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", value)
  return re.sub(r"[_ ]+", "_", value).lower()


def _getter_names(segment):
  camelized = camelize(segment)
  snake = snake_case(segment)
  return [
    "get" + camelized, "is" + camelized, "has" + camelized,
    "get_" + snake, "is_" + snake, "has_" + snake,
  ]


def _attribute_names(segment):
  snake = snake_case(segment)
  return [segment] if snake == segment else [segment, snake]


class MagicCallable(object):
  """
  Opt-in interface for objects that answer arbitrary getter calls.

  When no accessor, getter or attribute resolves a field, a :any:`BaseFieldDescription`
  calls :samp:`target.magic_call("get" + camelize(field), [])` on targets implementing this.
  """

  @abstractmethod
  def magic_call(self, method, arguments):
    """Handles a call to :samp:`method`, which the object does not define."""
    pass # pragma: no cover


class BaseFieldDescription(object):
  """
  Describes one field of an admin: its name, ORM mappings, options and collaborators.

  The description reads values from target objects with :any:`get_field_value`.
  The strategy that first succeeds for a field is remembered per field name and reused
  on later calls without probing again. The cache assumes every target handed to one
  description has the same shape; call :any:`clear_getter_cache` if that stops being true.
  """
  # pylint: disable=too-many-instance-attributes, too-many-public-methods

  camelize = staticmethod(camelize)

  # pylint: disable=too-many-arguments
  def __init__(
      self,
      name,
      options=None,
      field_mapping=None,
      association_mapping=None,
      parent_association_mappings=None,
      field_name=None,
      logger=None):
    """
    :param name:
      Name of the field in the admin. May be dotted, e.g. ``"author.name"``.
    :param options:
      Dict of options. See :any:`set_options`.
    :param field_mapping:
      ORM mapping of the field, if it is a plain column.
    :param association_mapping:
      ORM mapping of the field, if it is an association.
    :param parent_association_mappings:
      List of association mappings leading from the admin's model to the field's model.
    :param field_name:
      Name of the field on the model. Defaults to the last segment of :samp:`name`.
    :param logger:
      A Logger object. Called to log which strategy resolves each field.
      Without one, logs go to this module's logger only if ``CRUDADMIN_DEBUG`` is set.
    """
    self._name = name
    self._field_name = field_name if field_name is not None else name.rsplit(".", 1)[-1]
    self._field_mapping = field_mapping if field_mapping is not None else {}
    self._association_mapping = association_mapping if association_mapping is not None else {}
    self._parent_association_mappings = \
      parent_association_mappings if parent_association_mappings is not None else []

    self._type = None
    self._template = None
    self._options = {}

    self._admin = None
    self._association_admin = None
    self._parent = None

    # Dict {(scope, field name): (kind, name, arguments)} of winning strategies.
    self._getter_cache = {}

    self.logger = logger
    if self.logger is None and environ.get("CRUDADMIN_DEBUG"):
      self.logger = getLogger(__name__)

    self.set_options(options if options is not None else {})

  #region Names and mappings
  @property
  def name(self):
    """Name of the field in the admin. Renaming does not change :any:`field_name`."""
    return self._name

  @name.setter
  def name(self, name):
    self._name = name

  @property
  def field_name(self):
    """Name of the field on the model."""
    return self._field_name

  @property
  def field_mapping(self):
    return self._field_mapping

  @property
  def association_mapping(self):
    return self._association_mapping

  @property
  def parent_association_mappings(self):
    return self._parent_association_mappings

  @property
  def mapping_type(self):
    """The ``type`` of the field mapping, or else of the association mapping."""
    mapping_type = self._field_mapping.get("type")
    if mapping_type is None:
      mapping_type = self._association_mapping.get("type")
    return mapping_type
  #endregion

  #region Collaborators
  @property
  def admin(self):
    """Admin owning this description."""
    return self._admin

  @admin.setter
  def admin(self, admin):
    self._admin = admin

  @property
  def association_admin(self):
    """Admin of the associated model. Setting it registers this description as its parent."""
    return self._association_admin

  @association_admin.setter
  def association_admin(self, association_admin):
    self._association_admin = association_admin
    association_admin.set_parent_field_description(self)

  def has_association_admin(self):
    return self._association_admin is not None

  @property
  def parent(self):
    """Parent admin, for descriptions of embedded admins."""
    return self._parent

  @parent.setter
  def parent(self, parent):
    self._parent = parent
  #endregion

  #region Options
  def get_option(self, key, default=None):
    return self._options.get(key, default)

  def set_option(self, key, value):
    if key in _STRATEGY_OPTIONS:
      self.clear_getter_cache()
    self._options[key] = value

  def get_options(self):
    return self._options

  def set_options(self, options):
    """
    Replaces every option. Changing ``accessor``, ``code`` or ``parameters`` forgets
    remembered strategies.

    ``type`` and ``template`` are moved to :any:`type` and :any:`template`.
    ``placeholder`` defaults to :any:`DEFAULT_PLACEHOLDER` and ``link_parameters`` to ``{}``.
    """
    options = dict(options)

    if "type" in options:
      self._type = options.pop("type")
    if "template" in options:
      self._template = options.pop("template")

    options.setdefault("placeholder", DEFAULT_PLACEHOLDER)
    options.setdefault("link_parameters", {})

    if any(self._options.get(key) != options.get(key) for key in _STRATEGY_OPTIONS):
      self.clear_getter_cache()
    self._options = options

  def merge_option(self, key, values):
    """
    Appends :samp:`values` to the sequence stored under :samp:`key`.
    Fails with :any:`InvalidOptionMerge` if the option holds something else.
    """
    current = self._options.get(key)
    if current is None:
      self._options[key] = list(values)
    elif not is_sequence(current):
      raise InvalidOptionMerge(key, current)
    else:
      self._options[key] = list(current) + list(values)

  @property
  def label(self):
    return self.get_option("label")

  @property
  def help(self):
    return self.get_option("help")

  @property
  def type(self):
    return self._type

  @type.setter
  def type(self, value):
    self._type = value

  @property
  def template(self):
    return self._template

  @template.setter
  def template(self, value):
    self._template = value

  def is_sortable(self):
    """True if ``sortable`` is ``True`` or names a field to sort by."""
    sortable = self.get_option("sortable", False)
    return sortable is True or (isinstance(sortable, str) and sortable != "")

  def is_virtual(self):
    """Virtual fields have no backing data and always resolve to :samp:`None`."""
    return bool(self.get_option("virtual_field", False))

  @property
  def translation_domain(self):
    """
    The ``translation_domain`` option, even when it is ``False``.
    Without that option, asks the admin; :samp:`None` if there is no admin.
    """
    if "translation_domain" in self._options:
      return self._options["translation_domain"]
    if self._admin is None:
      return None
    return self._admin.get_translation_domain()
  #endregion

  #region Model hooks
  @property
  @abstractmethod
  def target_model(self):
    """Class of the associated model, for association fields."""
    pass # pragma: no cover

  @abstractmethod
  def is_identifier(self):
    """Whether the field is (part of) the model's identifier."""
    pass # pragma: no cover

  @abstractmethod
  def get_value(self, target):
    """Reads this field's value from :samp:`target`."""
    pass # pragma: no cover
  #endregion

  #region Value resolution
  def get_field_value(self, target, field_path):
    """
    Reads :samp:`field_path` from :samp:`target`.

    Dotted paths are followed segment by segment. Intermediate segments are read with
    getters and attributes only; the last one may also use the ``accessor`` option, or the
    deprecated ``code`` and ``parameters`` options, before falling back to getters,
    attributes and :any:`MagicCallable`.

    :return:
      The value; :samp:`None` if :samp:`target` is :samp:`None`, if the field is virtual,
      or if a segment along the path is :samp:`None`.
    :raises NoValueError: if nothing can read the value.
    """
    if target is None or self.is_virtual():
      return None
    self._warn_legacy_options()
    return self._walk(target, field_path, self._resolve_leaf)

  def clear_getter_cache(self):
    """Forgets every remembered strategy."""
    self._getter_cache.clear()

  def cached_strategy(self, field_name):
    """Kind of strategy remembered for the leaf :samp:`field_name`, or :samp:`None`."""
    strategy = self._getter_cache.get((_LEAF, field_name))
    return None if strategy is None else strategy[0]

  def _warn_legacy_options(self):
    # Attributed to whoever called the public method that calls this.
    if not self.get_option("code"):
      return
    warn_deprecated("code", "use the accessor option instead", stacklevel=4)
    if self.get_option("parameters"):
      warn_deprecated("parameters", "use a callable accessor instead", stacklevel=4)

  def _walk(self, target, field_path, resolve_leaf):
    head, dot, tail = field_path.partition(".")
    if not dot:
      return resolve_leaf(target, head)

    child = self._resolve_segment(target, head)
    if child is None:
      return None
    if isinstance(child, _SCALAR_TYPES):
      raise NoValueError(field_path, target, "Segment %r is not an object." % head)
    return self._walk(child, tail, resolve_leaf)

  def _resolve_leaf(self, target, segment):
    probes = (self._probe_accessor, self._probe_code, self._probe_convention, self._probe_magic)
    return self._resolve(_LEAF, target, segment, probes)

  def _resolve_segment(self, target, segment):
    return self._resolve(_PATH, target, segment, (self._probe_convention, self._probe_magic))

  def _resolve(self, scope, target, segment, probes):
    key = (scope, segment)
    strategy = self._getter_cache.get(key)
    if strategy is not None:
      return self._apply(strategy, target, segment)

    for probe in probes:
      strategy = probe(target, segment)
      if strategy is not None:
        self._getter_cache[key] = strategy
        if self.logger is not None:
          self.logger.debug("Field %s resolves %r on %s with %s %r",
                            self._name, segment, type(target).__name__, strategy[0], strategy[1])
        return self._apply(strategy, target, segment)

    raise NoValueError(segment, target)

  def _apply(self, strategy, target, segment):
    kind, name, arguments = strategy

    if kind == "accessor":
      if callable(name):
        return name(target)
      return self._walk(target, name, self._resolve_segment)

    if kind == "magic":
      if not isinstance(target, MagicCallable):
        raise NoValueError(segment, target, "Remembered magic call %r is not supported." % name)
      return target.magic_call(name, list(arguments))

    value = getattr(target, name, _MISSING)
    if value is _MISSING:
      raise NoValueError(segment, target, "Remembered %s %r is missing." % (kind, name))
    if kind == "attribute":
      return value
    return value(*arguments)

  def _probe_accessor(self, target, segment):
    # pylint: disable=unused-argument
    accessor = self.get_option("accessor")
    if accessor is None:
      return None
    if not callable(accessor) and not isinstance(accessor, str):
      raise TypeError("Expected a callable or a field path as accessor, got: %r" % (accessor,))
    return ("accessor", accessor, ())

  def _probe_code(self, target, segment):
    # pylint: disable=unused-argument
    code = self.get_option("code")
    if not code:
      return None
    if not callable(getattr(target, code, None)):
      if self.logger is not None:
        self.logger.debug("Method %r from the code option is missing on %s",
                          code, type(target).__name__)
      return None

    parameters = self.get_option("parameters")
    return ("code", code, tuple(parameters or ()))

  def _probe_convention(self, target, segment):
    # pylint: disable=no-self-use
    for name in _getter_names(segment):
      if callable(getattr(target, name, None)):
        return ("getter", name, ())
    for name in _attribute_names(segment):
      if getattr(target, name, _MISSING) is not _MISSING:
        return ("attribute", name, ())
    return None

  def _probe_magic(self, target, segment):
    # pylint: disable=no-self-use
    if isinstance(target, MagicCallable):
      return ("magic", "get" + camelize(segment), ())
    return None
  #endregion


class FieldDescription(BaseFieldDescription):
  """
  :any:`BaseFieldDescription` for plain mapping dicts, independent of any ORM.

  Understands ``field_mapping["id"]``, ``association_mapping["target_entity"]`` and
  parent association mappings carrying a ``field_name``.
  """

  @property
  def target_model(self):
    return self.association_mapping.get("target_entity")

  def is_identifier(self):
    return bool(self.field_mapping.get("id", False))

  def get_value(self, target):
    """Follows the parent association mappings, then reads :any:`field_name`."""
    if target is None or self.is_virtual():
      return None
    self._warn_legacy_options()
    for mapping in self.parent_association_mappings:
      target = self._walk(target, mapping["field_name"], self._resolve_segment)
      if target is None:
        return None
    return self._walk(target, self.field_name, self._resolve_leaf)
