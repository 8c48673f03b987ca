from .cookies import make_cookie_header

__all__ = ["make_cookie_header"]
