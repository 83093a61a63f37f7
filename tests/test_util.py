from unittest import TestCase

from crudadmin._util import is_sequence, no_null_values


class UtilTest(TestCase):
  def test_no_null_values(self):
    self.assertEqual(no_null_values({"a": 1, "b": None, "c": False}), {"a": 1, "c": False})

  def test_is_sequence(self):
    self.assertTrue(is_sequence([]))
    self.assertTrue(is_sequence(("a",)))
    self.assertFalse(is_sequence("abc"))
    self.assertFalse(is_sequence({"a": 1}))
    self.assertFalse(is_sequence(None))
