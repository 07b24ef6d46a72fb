"""Repo-root Uvicorn entrypoint.

Allows running the backend from the repo root:

    uvicorn app.main:app --reload

This builds the FastAPI app defined in `backend/app/main.py` from the environment.
"""

from backend.app.main import create_app

app = create_app()
