import logging
from collections.abc import Callable

from fastapi import HTTPException, Request, status

from urlsigner.errors import (
    DecodeError,
    Expired,
    InvalidFormat,
    InvalidSignature,
    InvalidURL,
    SignedURLError,
)
from urlsigner.signed_urls import get_signer
from urlsigner.signer import Signer

logger = logging.getLogger(__name__)

_STATUS_CODES: dict[type[SignedURLError], int] = {
    InvalidURL: status.HTTP_400_BAD_REQUEST,
    InvalidFormat: status.HTTP_400_BAD_REQUEST,
    DecodeError: status.HTTP_400_BAD_REQUEST,
    InvalidSignature: status.HTTP_401_UNAUTHORIZED,
    Expired: status.HTTP_410_GONE,
}


def signed_request_url(request: Request) -> str:
    """
    The request URL with its path exactly as the client sent it.

    ``request.url`` is rebuilt from the percent-decoded ``scope["path"]``,
    while signatures cover the escaped text (``%20``, ``%2F``, ...).
    ASGI servers that do not provide ``raw_path`` fall back to ``request.url``.
    """
    raw_path = request.scope.get("raw_path")
    if not raw_path:
        return str(request.url)
    # some servers leave the query string on raw_path
    path = raw_path.split(b"?", 1)[0].decode("latin-1")
    return str(request.url.replace(path=path))


class SignedURLGuard:
    """
    FastAPI dependency that rejects requests whose URL is not validly signed.

    Usage::

        @router.get("/files/{name}", dependencies=[Depends(require_signed_url)])
    """

    def __init__(self, signer_factory: Callable[[], Signer]):
        self._get_signer = signer_factory

    def __call__(self, request: Request) -> None:
        url = signed_request_url(request)
        try:
            self._get_signer().verify(url)
        except SignedURLError as exc:
            logger.warning("Rejected signed URL %s: %s", url, exc)
            raise HTTPException(
                status_code=_STATUS_CODES.get(type(exc), status.HTTP_400_BAD_REQUEST),
                detail=str(exc),
            ) from exc


require_signed_url = SignedURLGuard(get_signer)
