"""Executable binding of a protocol command."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from wdwire.commands.tables import CommandDescriptor
from wdwire.protocol.errors import INVALID_ARGUMENT, WebDriverError
from wdwire.protocol.request import make_request

if TYPE_CHECKING:
    from wdwire.client import WebDriverClient

logger = logging.getLogger(__name__)

SESSION_ID_VARIABLE = ":sessionId"
HUB_PREFIX = "/grid"

# Methods that never carry a request body
BODYLESS_METHODS = ("GET", "DELETE")


@dataclass(frozen=True)
class CommandBinding:
    """A command bound to its HTTP method and endpoint template."""

    method: str
    endpoint: str
    descriptor: CommandDescriptor
    is_selenium_standalone: bool = False

    @property
    def name(self) -> str:
        return self.descriptor.command

    @property
    def is_hub_command(self) -> bool:
        """Grid commands are addressed from the server root, not the base path."""
        return self.is_selenium_standalone and self.endpoint.startswith(HUB_PREFIX)

    def _check_arity(self, args: tuple[Any, ...]) -> None:
        descriptor = self.descriptor
        minimum = len(descriptor.variables) + len(descriptor.required_parameters)
        maximum = len(descriptor.variables) + len(descriptor.parameters)
        if not minimum <= len(args) <= maximum:
            raise WebDriverError(
                message=(
                    f"Wrong parameters applied for {self.name}\n"
                    f"Usage: {descriptor.usage()}"
                ),
                error=INVALID_ARGUMENT,
            )

    def build_request(
        self,
        session_id: str | None,
        args: tuple[Any, ...],
    ) -> tuple[str, dict[str, Any] | None]:
        """
        Resolve the endpoint path and request body for a call.

        Positional arguments fill the URL variables first, then the body
        parameters in declaration order.

        Raises:
            WebDriverError: If the argument count does not fit the command.
        """
        self._check_arity(args)

        path = self.endpoint
        if SESSION_ID_VARIABLE in path:
            path = path.replace(SESSION_ID_VARIABLE, quote(str(session_id or ""), safe=""))

        variables = self.descriptor.variables
        for variable, value in zip(variables, args):
            path = path.replace(f":{variable.name}", quote(str(value), safe=""))

        if self.method in BODYLESS_METHODS:
            return path, None

        body = {
            parameter.name: value
            for parameter, value in zip(self.descriptor.parameters, args[len(variables):])
        }
        return path, body

    async def execute(self, client: "WebDriverClient", *args: Any) -> Any:
        """
        Run the command on an established session.

        Returns:
            The ``value`` of the response body. For element lookups that
            found nothing this is the remote end's error value.

        Raises:
            WebDriverError: If the arguments are invalid or the response
                is classified as a failure.
            TransportError: If the request cannot be sent.
        """
        path, body = self.build_request(client.session_id, args)
        logger.info(f"COMMAND {self.name}({', '.join(repr(a) for a in args)})")

        response = await make_request(
            client.transport,
            self.method,
            path,
            body,
            use_base_path=not self.is_hub_command,
        )
        return response.get("value")

    def __str__(self) -> str:
        return f"{self.name} -> {self.method} {self.endpoint}"
