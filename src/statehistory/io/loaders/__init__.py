from .errors import LoaderError
from .session_loader import load_session, load_session_text

__all__ = ["LoaderError", "load_session", "load_session_text"]
