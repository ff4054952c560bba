from __future__ import annotations

import os

from fastapi.staticfiles import StaticFiles


class DevStaticFiles(StaticFiles):
    """StaticFiles for the dev server.

    Directory listing stays off, responses are never cached, and a mount
    whose directory does not exist yet answers 404 instead of erroring.
    """

    def __init__(self, *args, cache_control: str | None = None, **kwargs):
        kwargs.setdefault("check_dir", False)
        super().__init__(*args, **kwargs)
        self.cache_control = cache_control or "no-store"

    async def check_config(self) -> None:
        if self.directory is not None and not os.path.isdir(self.directory):
            return
        await super().check_config()

    async def get_response(self, path: str, scope):
        response = await super().get_response(path, scope)
        if self.cache_control and response.status_code == 200:
            response.headers.setdefault("Cache-Control", self.cache_control)
        return response
