"""HTTP API for structokens (FastAPI app in ``structokens.server.app``)."""
