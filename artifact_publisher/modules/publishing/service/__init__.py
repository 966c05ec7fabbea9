from .pipeline import Publisher

__all__ = ["Publisher"]
