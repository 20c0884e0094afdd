"""
Discord integration for Modrouter.

- **discord_gateway.py**: py-cord implementations of the dispatch engine's
  collaborators (reply sender, moderation actions, content filter) and the
  conversion of ``discord.Message`` into ``RawMessage``.

- **cogs/command_listener.py**: Cog forwarding guild messages to the engine.
"""
