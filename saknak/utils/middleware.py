from starlette.middleware.cors import CORSMiddleware
from starlette.types import ASGIApp, Receive, Scope, Send


class AppCORSMiddleware(CORSMiddleware):
    """CORSMiddleware that leaves some path prefixes to their own routes.

    The /functions job endpoints answer preflights themselves with an empty
    200 and fixed permissive headers.
    """

    def __init__(self, app: ASGIApp, exclude_prefixes: tuple = (), **kwargs):
        super().__init__(app, **kwargs)
        self.exclude_prefixes = tuple(exclude_prefixes)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["path"].startswith(self.exclude_prefixes):
            await self.app(scope, receive, send)
            return
        await super().__call__(scope, receive, send)
