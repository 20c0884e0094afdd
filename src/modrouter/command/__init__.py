"""
The command authorization and dispatch core.

- **duration_parser.py**: ``XdXhXm`` duration tokens to expiry instants.
- **argument_extractor.py**: Positional argument extraction per command kind.
- **command_matcher.py**: The command grammar; classifies raw text.
- **privilege_resolver.py**: Role set to privilege tier, and the cumulative
  command set of every tier.
- **replies.py**: Reply templates.
- **interfaces.py**: Protocols for the content filter, moderation actions and
  reply sender.
- **dispatch_engine.py**: Runs a message through all of the above.

Nothing in this package talks to Discord directly.
"""
