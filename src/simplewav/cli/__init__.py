from simplewav.cli.commands import app

__all__ = ["app"]
