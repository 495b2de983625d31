"""Entry point: delegates to the CLI app (serve, init-db, seed, catalog)."""

from rich.traceback import install

from bookhub.cli import app

if __name__ == "__main__":
    install(show_locals=False, max_frames=5, word_wrap=True)
    app()
