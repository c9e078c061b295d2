"""Simple entrypoint to restore the Sourced session locally."""

import asyncio
import json

from sourced_app.app import SourcedApp


async def _run(app: SourcedApp) -> dict:
    await app.start()
    await app.flow.drain_background()
    return app.flow.session.snapshot()


def main() -> None:
    app = SourcedApp()
    print(json.dumps(asyncio.run(_run(app)), indent=2))


if __name__ == "__main__":
    main()
