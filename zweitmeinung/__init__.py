"""
ZWEITMEINUNG, site vitrine rendu côté serveur, contenu piloté par Strapi.

Démarrer : uvicorn zweitmeinung.api.main:app --reload --port 8001
"""

__version__ = "1.0.0"
