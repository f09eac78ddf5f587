"""ServeService — preview the built site over HTTP.

Serves whatever is in the output directory; it does not watch for
changes. Re-run ``shutterlog serve`` (or ``build``) after editing.
"""

from __future__ import annotations

import logging
from functools import partial
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import TYPE_CHECKING, Any

from shutterlog.services.base import BaseService
from shutterlog.services.result import ServiceResult

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


class _QuietHandler(SimpleHTTPRequestHandler):
    """Route request logs through logging instead of raw stderr."""

    def log_message(self, format: str, *args: Any) -> None:
        logger.debug("%s - %s", self.address_string(), format % args)


def make_server(directory: Path, host: str, port: int) -> ThreadingHTTPServer:
    """Bind a threaded static file server rooted at *directory*."""
    handler = partial(_QuietHandler, directory=str(directory))
    return ThreadingHTTPServer((host, port), handler)


class ServeService(BaseService):
    """Serve the site's output directory until interrupted."""

    def serve(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        on_ready: Callable[[str], None] | None = None,
    ) -> ServiceResult:
        """Block serving files; *on_ready* receives the URL once bound."""
        config = self._site.settings.serve
        host = host or config.host
        port = config.port if port is None else port
        output_dir = self._site.output_dir

        if not output_dir.is_dir():
            return ServiceResult.failure(
                "serve",
                "NO_OUTPUT",
                f"Output directory does not exist: {output_dir}",
                output_dir=str(output_dir),
            )

        try:
            server = make_server(output_dir, host, port)
        except OSError as exc:
            return ServiceResult.failure(
                "serve",
                "BIND_FAILED",
                f"Cannot listen on {host}:{port}: {exc}",
                host=host,
                port=port,
            )

        bound_host, bound_port = server.server_address[:2]
        url = f"http://{bound_host}:{bound_port}/"
        logger.info("Serving %s at %s", output_dir, url)
        if on_ready is not None:
            on_ready(url)
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            logger.debug("Serve interrupted")
        finally:
            server.server_close()

        return ServiceResult(
            ok=True,
            op="serve",
            data={"url": url, "output_dir": str(output_dir)},
        )
