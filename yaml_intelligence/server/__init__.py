"""Language server front end for the YAML intelligence engine."""

from .server import YamlIntelligenceLanguageServer

__all__ = ["YamlIntelligenceLanguageServer"]
