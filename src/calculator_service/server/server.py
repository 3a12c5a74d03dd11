"""HTTP server running the calculator application."""
import signal
import threading
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, IPvAnyAddress, PrivateAttr
from werkzeug.serving import BaseWSGIServer, make_server

from calculator_service.common.config import ServiceSettings
from calculator_service.common.logger import logger
from calculator_service.server.app import create_app


class ServerStartupError(RuntimeError):
    """Raised when the server cannot bind its listening socket."""


def _raise_keyboard_interrupt(signum, frame) -> None:
    raise KeyboardInterrupt


class CalculatorServer(BaseModel):
    """
    WSGI server serving the calculator application.

    Features:
        - One thread per request when ``threaded`` is set.
        - Stops cleanly on Ctrl-C or SIGTERM.
        - Reports bind failures as ServerStartupError.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    host: IPvAnyAddress = Field(default="127.0.0.1", description="Server host address")
    port: int = Field(default=8000, ge=0, le=65535, description="Server TCP port, 0 picks a free one")
    threaded: bool = Field(default=True, description="Handle each request in its own thread")

    _httpd: Optional[BaseWSGIServer] = PrivateAttr(default=None)

    @classmethod
    def from_settings(cls, settings: ServiceSettings) -> "CalculatorServer":
        return cls(host=settings.host, port=settings.port, threaded=settings.threaded)

    def bind(self) -> BaseWSGIServer:
        """
        Create the WSGI server and bind its socket.

        :return: Bound server, not yet serving
        :rtype: BaseWSGIServer
        :raises ServerStartupError: If the address cannot be bound
        """
        try:
            # werkzeug reports bind errors through sys.exit(1)
            self._httpd = make_server(
                str(self.host), self.port, create_app(), threaded=self.threaded
            )
        except (OSError, SystemExit) as exc:
            raise ServerStartupError(f"Could not bind {self.host}:{self.port}") from exc
        return self._httpd

    @property
    def bound_port(self) -> Optional[int]:
        """Port actually bound, useful when ``port`` is 0."""
        return self._httpd.server_port if self._httpd is not None else None

    def start(self) -> None:
        """
        Bind, then serve requests until interrupted.

        :return: None
        :raises ServerStartupError: If the address cannot be bound
        """
        logger.info(f"🖥️ Starting server on {self.host}:{self.port}")
        httpd = self._httpd or self.bind()

        # Signal handlers can only be installed from the main thread
        in_main_thread = threading.current_thread() is threading.main_thread()
        if in_main_thread:
            previous_handler = signal.signal(signal.SIGTERM, _raise_keyboard_interrupt)
        logger.info(f"🖥️ Server listening on {self.host}:{httpd.server_port}")
        try:
            # serve_forever returns on KeyboardInterrupt and closes the socket
            httpd.serve_forever()
        finally:
            if in_main_thread:
                signal.signal(signal.SIGTERM, previous_handler)
            self._httpd = None
            logger.info("🛑 Server stopped")

    def stop(self) -> None:
        """Ask a server running in another thread to stop."""
        if self._httpd is not None:
            self._httpd.shutdown()
