from .completion import CompletionResult, NoResult
from .dispatcher import EditorContext, YamlIntelligence

__all__ = ["CompletionResult", "NoResult", "EditorContext", "YamlIntelligence"]
