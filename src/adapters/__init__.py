"""Adaptadores concretos (HTTP, consola, disco, IA).

Cada módulo implementa o complementa un contrato de `core.interfaces`.
"""
