"""CLI (Typer + Rich): comandos, diagnósticos y componentes visuales."""
