"""Entry point: delegates to the CLI app (one module per command)."""

from rich.traceback import install

from logistx.cli import app
from logistx.utils.tracing import shutdown_tracing

if __name__ == "__main__":
    try:
        install(show_locals=False, max_frames=5, word_wrap=True)
        app()
    finally:
        shutdown_tracing()
