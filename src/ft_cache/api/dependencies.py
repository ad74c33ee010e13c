"""FastAPI dependency: get_cache_registry.

Usage in any router:
    from src.ft_cache.api.dependencies import get_cache_registry

    @router.get("/things")
    async def things(caches: CacheRegistry = Depends(get_cache_registry)):
        ...
"""

from starlette.requests import Request

from src.ft_cache.application.registry import CacheRegistry


def get_cache_registry(request: Request) -> CacheRegistry:
    """Return the registry owned by the running application."""
    return request.app.state.caches
