"""Console entry point for running the API locally."""

import os


def main() -> None:
    """Serve the NutriSnap API with uvicorn."""
    import uvicorn

    host = os.getenv("HOST", "127.0.0.1")
    port = int(os.getenv("PORT", "8000"))
    print(f"NutriSnap listening on http://{host}:{port}")
    uvicorn.run("nutrisnap.api.asgi:app", host=host, port=port, reload=False)
