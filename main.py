"""Entrypoint for `uvicorn main:app`."""
from shopledger.main import app  # noqa: F401
