from unittest import TestCase
from unittest.mock import Mock

from crudadmin.field_description import MagicCallable


class CrudAdminTestCase(TestCase):
  def assert_raises(self, exception_class, action):
    """Like self.assertRaises and returns the exception too."""
    with self.assertRaises(exception_class) as cm:
      action()
    return cm.exception


def getter_mock(**methods):
  """Mock that only has the given methods, each returning its value."""
  mock = Mock(spec=sorted(methods))
  for name, value in methods.items():
    getattr(mock, name).return_value = value
  return mock


class FooCall(MagicCallable):
  """Answers every magic call with the method name and arguments."""

  def __init__(self):
    self.calls = 0

  def magic_call(self, method, arguments):
    self.calls += 1
    return [method, arguments]
