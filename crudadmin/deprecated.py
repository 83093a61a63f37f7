import warnings


def warn_deprecated(subject, reason, stacklevel=3):
  """
  Emits a :samp:`DeprecationWarning` formatted like ``"<subject>: <reason>"``.

  The default :samp:`stacklevel` points at the caller of the function that calls this.
  """
  fmt = "{subject}: {reason}"
  warnings.warn(
    fmt.format(subject=subject, reason=reason),
    category=DeprecationWarning,
    stacklevel=stacklevel
  )
