"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) que implementan adaptadores concretos.
- Permite invertir dependencias: el Resolver depende de abstracciones, no de httpx ni de la consola.
"""
