"""Servicios del Core (resolución, selección, orquestación)."""
