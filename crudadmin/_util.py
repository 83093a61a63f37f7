def no_null_values(dct):
  out = {}
  for key in dct:
    val = dct[key]
    if val is not None:
      out[key] = val
  return out


def is_sequence(value):
  """True for lists and tuples; strings and mappings are not option sequences."""
  return isinstance(value, (list, tuple))
