"""Module entry point for `python -m dynamic_grpc_invoker`."""

from .cli import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
