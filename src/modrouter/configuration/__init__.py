"""
Configuration management for Modrouter.

- **app_configuration.py**: YAML configuration loader for global settings.
  Provides application details for the about reply, the staff role
  identifiers of every privilege tier, and the channel that receives
  moderation reports. Falls back gracefully on missing or malformed files.

- **engine_config.py**: The immutable ``EngineConfig`` value injected into the
  dispatch engine.
"""
