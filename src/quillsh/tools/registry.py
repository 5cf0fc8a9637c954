"""Tool registry exposing the shell to agents."""

from __future__ import annotations

import builtins
import json
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from loguru import logger
from pydantic import BaseModel
from republic import Tool, tool_from_model

ToolHandler = Callable[[Any], str]


def _shorten_text(text: str, width: int = 30, placeholder: str = "...") -> str:
    """Shorten text to width characters, cutting in the middle of words if needed."""
    if len(text) <= width:
        return text

    available = width - len(placeholder)
    if available <= 0:
        return placeholder

    return text[:available] + placeholder


@dataclass(frozen=True)
class ToolDescriptor:
    """Tool metadata, its input model and the runtime handle."""

    name: str
    short_description: str
    detail: str
    model: type[BaseModel]
    handler: ToolHandler
    tool: Tool
    source: str = "builtin"


class ToolRegistry:
    """Registry for the tools a session offers to a model."""

    def __init__(self) -> None:
        self._tools: dict[str, ToolDescriptor] = {}

    def register(
        self,
        *,
        name: str,
        short_description: str,
        model: type[BaseModel],
        detail: str | None = None,
        source: str = "builtin",
    ) -> Callable[[ToolHandler], ToolHandler]:
        """Decorator registering ``handler(params)`` under ``name``."""

        def decorator(handler: ToolHandler) -> ToolHandler:
            wrapped = self._wrap_handler(name, handler)
            self._tools[name] = ToolDescriptor(
                name=name,
                short_description=short_description,
                detail=detail or short_description,
                model=model,
                handler=wrapped,
                tool=tool_from_model(model, wrapped, name=name, description=short_description),
                source=source,
            )
            return handler

        return decorator

    def has(self, name: str) -> bool:
        return name in self._tools

    def get(self, name: str) -> ToolDescriptor | None:
        return self._tools.get(name)

    def descriptors(self) -> builtins.list[ToolDescriptor]:
        return sorted(self._tools.values(), key=lambda item: item.name)

    @staticmethod
    def to_model_name(name: str) -> str:
        return name.replace(".", "_")

    def compact_rows(self, *, for_model: bool = False) -> builtins.list[str]:
        rows: builtins.list[str] = []
        for descriptor in self.descriptors():
            display_name = self.to_model_name(descriptor.name) if for_model else descriptor.name
            if for_model and display_name != descriptor.name:
                rows.append(f"{display_name} (command: {descriptor.name}): {descriptor.short_description}")
            else:
                rows.append(f"{display_name}: {descriptor.short_description}")
        return rows

    def detail(self, name: str) -> str:
        descriptor = self.get(name)
        if descriptor is None:
            raise KeyError(name)

        return (
            f"name: {descriptor.name}\n"
            f"source: {descriptor.source}\n"
            f"description: {descriptor.short_description}\n"
            f"detail: {descriptor.detail}\n"
            f"schema: {descriptor.model.model_json_schema()}"
        )

    def model_tools(self) -> builtins.list[Tool]:
        """Tools renamed for model APIs, which do not accept dots in names."""
        tools: builtins.list[Tool] = []
        seen_names: set[str] = set()
        for descriptor in self.descriptors():
            model_name = self.to_model_name(descriptor.name)
            if model_name in seen_names:
                raise ValueError(f"Duplicate model tool name after conversion: {model_name}")
            seen_names.add(model_name)

            base = descriptor.tool
            tools.append(
                Tool(
                    name=model_name,
                    description=base.description,
                    parameters=base.parameters,
                    handler=base.handler,
                    context=base.context,
                )
            )
        return tools

    def _log_tool_call(self, name: str, params: BaseModel) -> None:
        rendered_params: list[str] = []
        for key, value in params.model_dump().items():
            try:
                rendered = json.dumps(value, ensure_ascii=False)
            except TypeError:
                rendered = repr(value)
            value = _shorten_text(rendered, width=30, placeholder="...")
            if value.startswith('"') and not value.endswith('"'):
                value = value + '"'
            rendered_params.append(f"{key}={value}")
        logger.info("tool.call.start name={} {{ {} }}", name, ", ".join(rendered_params))

    def _wrap_handler(self, name: str, handler: ToolHandler) -> ToolHandler:
        def _handler(params: BaseModel) -> str:
            self._log_tool_call(name, params)
            start = time.monotonic()
            try:
                return handler(params)
            except Exception:
                logger.exception("tool.call.error name={}", name)
                raise
            finally:
                duration = time.monotonic() - start
                logger.info("tool.call.end name={} duration={:.3f}ms", name, duration * 1000)

        return _handler

    def execute(self, name: str, *, kwargs: dict[str, Any]) -> str:
        """Validate ``kwargs`` against the tool's input model and run it."""
        descriptor = self.get(name)
        if descriptor is None:
            raise KeyError(name)

        params = descriptor.model.model_validate(kwargs)
        return descriptor.handler(params)
