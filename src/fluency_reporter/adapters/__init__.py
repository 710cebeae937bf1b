"""Adapters connecting the reporter to concrete sinks."""
