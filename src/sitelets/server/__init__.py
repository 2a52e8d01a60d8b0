"""ASGI boundary — turns dispatch results and routing errors into responses."""
