from __future__ import annotations

from typing import Iterable

import structlog

from sortviz.core.config.settings import AppSettings, settings
from sortviz.core.engine.router import EventComponent
from sortviz.core.logging.setup import configure_logging
from sortviz.renderers.log import LogRenderer
from sortviz.session.session import SortSession

log = structlog.get_logger()


def create_session(
    *,
    app_settings: AppSettings | None = None,
    components: Iterable[EventComponent] | None = None,
) -> SortSession:
    """
    Session factory.

    The single place where a SortSession is created and wired to renderers.
    """
    cfg = app_settings or settings
    session = SortSession(settings=cfg, components=components)
    log.info(
        "app.session_created",
        environment=cfg.env,
        size=session.config.size,
        speed_level=session.config.speed_level,
        algorithm=session.config.algorithm,
    )
    return session


def main() -> None:
    """
    Headless demo: one run of the configured algorithm, rendered as logs.
    """
    configure_logging(level=settings.log_level, fmt=settings.log_format)

    session = create_session(components=[LogRenderer()])
    log.info("app.startup", environment=settings.env)

    state = session.run()
    log.info("app.shutdown", state=state, values=list(session.values))


if __name__ == "__main__":
    main()
