"""HTTP Request Tool - call any HTTP endpoint on behalf of an agent.

Combines the auth dispatcher and the response optimizer for one call:

    RequestSpec -> auth strategy -> transport/signer -> raw response -> optimizer -> str

Example:
    >>> tool = HttpRequestTool(
    ...     HttpRequestToolConfig(
    ...         name="list_repos",
    ...         description="List repositories of the authenticated user",
    ...         auth=GenericCredentialAuth(kind="httpHeaderAuth"),
    ...         optimizer=JsonOptimizerConfig(fields_to_include="selected", fields="name,url"),
    ...     ),
    ...     Collaborators(transport=HttpxTransport(), credentials=store),
    ... )
    >>> text = await tool.acall(RequestSpec(url="https://api.example.com/repos"))
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from anycall.foundation.errors import ToolError
from anycall.http import AuthConfig, Collaborators, NoAuthConfig, RequestSpec, resolve_request_function
from anycall.observability import get_logger, log_context
from anycall.optimize import OptimizerConfig, configure_response_optimizer

log = get_logger("anycall.tools")


def prettify_tool_name(tool_name: str) -> str:
    """'get_weather_data' -> 'Get Weather Data'"""
    return " ".join(part[:1].upper() + part[1:] for part in tool_name.split("_"))


class ToolParameter(BaseModel):
    """A placeholder the agent fills in when calling the tool."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: Annotated[str, Field(min_length=1)]
    type: Literal["any", "string", "number", "boolean"] = "any"
    description: str = ""


class HttpRequestToolConfig(BaseModel):
    """Static configuration of one HTTP request tool.

    Attributes:
        name: Tool name exposed to the agent (snake_case)
        description: What the endpoint does
        auth: Authentication mode and its parameters
        optimizer: Response shaping, None to return the raw response serialized
        parameters: Placeholders the agent provides
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        json_schema_extra={
            "title": "HTTP Request Tool Configuration",
            "examples": [{
                "name": "get_weather",
                "description": "Current weather for a city",
                "auth": {"mode": "genericCredentialType", "kind": "httpQueryAuth"},
                "optimizer": {"kind": "json", "fields_to_include": "selected", "fields": "main.temp"},
            }],
        },
    )

    name: Annotated[str, Field(min_length=1, pattern=r"^[A-Za-z0-9_]+$")]
    description: str = ""
    auth: AuthConfig = Field(default_factory=NoAuthConfig)
    optimizer: OptimizerConfig | None = None
    parameters: tuple[ToolParameter, ...] = ()


class HttpRequestTool:
    """Dispatch one authenticated request and return the optimized response."""

    __slots__ = ("_config", "_collaborators")

    def __init__(self, config: HttpRequestToolConfig, collaborators: Collaborators) -> None:
        self._config = config
        self._collaborators = collaborators

    @property
    def config(self) -> HttpRequestToolConfig:
        return self._config

    @property
    def name(self) -> str:
        return self._config.name

    @property
    def display_name(self) -> str:
        return prettify_tool_name(self._config.name)

    def args_schema(self) -> dict[str, Any]:
        """JSON Schema object for the arguments the agent supplies.

        Parameters typed ``any`` accept any JSON value.
        """
        properties: dict[str, dict[str, Any]] = {}
        for param in self._config.parameters:
            prop: dict[str, Any] = {} if param.type == "any" else {"type": param.type}
            if param.description:
                prop["description"] = param.description
            properties[param.name] = prop
        return {"type": "object", "properties": properties, "required": list(properties)}

    async def execute(self, spec: RequestSpec, *, item_index: int = 0) -> str:
        """Run the call. Errors propagate unchanged."""
        send = await resolve_request_function(self._config.auth, self._collaborators, item_index=item_index)
        optimize = configure_response_optimizer(self._config.optimizer, item_index=item_index)
        return optimize(await send(spec))

    async def acall(self, spec: RequestSpec, *, item_index: int = 0) -> str:
        """Run the call, rendering any failure as a ToolError message for the agent."""
        with log_context(tool=self.name, item_index=item_index):
            try:
                return await self.execute(spec, item_index=item_index)
            except Exception as e:
                error = ToolError.from_exception(self.name, e)
                if error.item_index is None:
                    error = error.model_copy(update={"item_index": item_index})
                log.error("tool call failed", code=str(error.code), error=error.message)
                return error.render()
