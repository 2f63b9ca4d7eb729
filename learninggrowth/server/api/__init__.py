"""FastAPI routers. Each module exposes a ``router`` mounted by :mod:`learninggrowth.server.main`."""
