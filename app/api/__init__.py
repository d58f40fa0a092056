# app/api/__init__.py
"""
🌐 REST API (FastAPI)

Роутеры по ресурсам лежат в app/api/routes/,
схемы запросов и ответов в app/api/schemas.py.
"""

from app.api.app import create_app

__all__ = ["create_app"]
