from .loader import LanguageModelLoaderProtocol

__all__ = ["LanguageModelLoaderProtocol"]
