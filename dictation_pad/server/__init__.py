"""HTTP surface for dictation sessions (FastAPI + pydantic).

WHY: A renderer (browser or desktop UI) needs a place to forward
recognition results and button presses and to read back what to show.

HOW: sessions.py keeps the thread-safe session registry, models.py the
request/response schemas, and app.py the FastAPI routes.
"""
