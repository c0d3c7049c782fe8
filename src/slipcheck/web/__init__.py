"""HTTP interface for slipcheck."""

from slipcheck.web.app import create_app

__all__ = ["create_app"]
