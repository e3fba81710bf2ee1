"""HTTP API for kinfinder."""


def __getattr__(name: str):
    # Importing the app module builds the default app, so defer it.
    if name == "create_app":
        from kinfinder.web.app import create_app

        globals()["create_app"] = create_app
        return create_app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["create_app"]
