"""Core domain: models, ports, configuration and record building."""
