"""
Modrouter - Discord Moderation Command Router

Modrouter lets a community's staff run moderation commands straight from chat.
Each message is checked against the sender's staff tier, parsed, validated,
and turned into a moderation action or an informational reply.

Core Components:

- **Privilege Resolver**: Maps a member's roles to a staff tier (trial
  moderator, moderator, senior moderator, manager); every tier inherits the
  commands of the tiers below it
- **Command Grammar**: Recognizes ``-b``, ``-ub``, ``-m``, ``-um``, ``-w``,
  ``-?``/``help`` and ``about``
- **Argument Extraction**: Turns free text into user id lists, ``XdXhXm``
  durations and reasons, reporting malformed commands back to the caller
- **Dispatch Engine**: Stateless per-message state machine driving all of the
  above and the Discord collaborators

Usage:
    from modrouter.main import main
    main()  # Connects to Discord and starts routing commands
"""
