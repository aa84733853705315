"""Application context for operations and MCP handlers.

Single object passed to every operation with the provider, the shared
response cache and the runtime options store.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from typelens.config.models import TypeLensConfig
from typelens.config.runtime import RuntimeOptions, RuntimeOptionsStore
from typelens.inspect.normalizer import MetadataNormalizer
from typelens.mcp.execution import ToolExecutor
from typelens.mcp.response_cache import InMemoryResponseCache, ResponseCache
from typelens.provider.base import IntrospectionProvider


@dataclass
class AppContext:
    """Context object passed to all operations.

    Holds the only shared mutable state of the process: the response cache
    and the runtime options store.
    """

    provider: IntrospectionProvider
    options: RuntimeOptionsStore
    cache: ResponseCache
    config: TypeLensConfig = field(default_factory=TypeLensConfig)
    normalizer: MetadataNormalizer = field(init=False)
    executor: ToolExecutor = field(init=False)

    def __post_init__(self) -> None:
        self.normalizer = MetadataNormalizer(self.provider)
        self.executor = ToolExecutor(self.cache, self.options)

    @classmethod
    def create(
        cls,
        provider: IntrospectionProvider | None = None,
        config: TypeLensConfig | None = None,
        cache: ResponseCache | None = None,
    ) -> AppContext:
        """Factory wiring a context from static config.

        Args:
            provider: Introspection provider (defaults to ManifestProvider)
            config: Loaded configuration (defaults to built-in defaults)
            cache: Response cache (defaults to a fresh in-memory cache)
        """
        from typelens.provider.manifest import ManifestProvider

        config = config or TypeLensConfig()
        return cls(
            provider=provider or ManifestProvider(),
            options=RuntimeOptionsStore(RuntimeOptions.from_config(config)),
            cache=cache or InMemoryResponseCache(),
            config=config,
        )
