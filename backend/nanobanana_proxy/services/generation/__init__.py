from .handler import GenerationHandler

__all__ = ["GenerationHandler"]
