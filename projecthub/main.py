"""Entry point: delegates to the CLI app (serve, init-db, seed, check-timers, check-users, import-file)."""

from rich.traceback import install

from projecthub.cli import app


def main() -> None:
    install(show_locals=False, max_frames=5, word_wrap=True)
    app()


if __name__ == "__main__":
    main()
