"""
Data types shared by the command router.

- **privilege_datatypes.py**: ``PrivilegeTier`` and ``CommandKind`` enums.
- **message_datatypes.py**: ``Actor``, ``RawMessage`` and ``CommandArguments``.
- **dispatch_datatypes.py**: ``DispatchOutcome``, ``ValidationFailure`` and
  the ``DispatchResult`` returned for every message.
"""
