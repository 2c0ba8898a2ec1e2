"""
Clients for the remote backends the portal depends on.

Both clients use ``requests`` and report failures through return
values rather than exceptions: every call returns ``(data, error)``
where ``error`` is ``None`` on success or a dictionary with the keys
``status_code`` and ``message``.
"""
