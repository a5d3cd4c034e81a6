"""Utilidades de persistencia y visualización de capas RBM."""
