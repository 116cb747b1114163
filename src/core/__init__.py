"""Core: dominio, contratos y servicios.

Por qué separado:
- No conoce httpx, Rich ni Typer; solo la lógica de resolución de portadas.
"""
