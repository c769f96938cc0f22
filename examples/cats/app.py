"""Cats: routing and custom middleware together.

Demonstrates:
- Function middleware (timing, adds X-Response-Time header)
- Class middleware (rate limiter, 5 req/min per IP, returns 429 when exceeded)
- Static, prefix, template and regex routes on one router
- threading.Lock for thread-safe shared state

Run:
    cd examples/cats && python app.py
"""

import threading
import time

from waypoint import Request, Response, Server
from waypoint.middleware.protocol import Next

CATS = {"1": "Molly", "2": "Oscar", "3": "Tiger"}

server = Server()
router = server.create_router()


# ---------------------------------------------------------------------------
# Function middleware: timing
# ---------------------------------------------------------------------------


async def timing(request: Request, response: Response, next: Next) -> Response:
    """Add X-Response-Time header to every response."""
    start = time.monotonic()
    response = await next(request, response)
    elapsed = time.monotonic() - start
    return response.with_header("X-Response-Time", f"{elapsed:.3f}s")


# ---------------------------------------------------------------------------
# Class middleware: rate limiter
# ---------------------------------------------------------------------------


class RateLimiter:
    """Per-IP rate limiter. Returns 429 when limit exceeded."""

    def __init__(self, max_requests: int, window: float) -> None:
        self.max_requests = max_requests
        self.window = window
        self._counts: dict[str, list[float]] = {}
        self._lock = threading.Lock()

    async def __call__(self, request: Request, response: Response, next: Next) -> Response:
        client_ip = request.headers.get("x-forwarded-for", "127.0.0.1")
        if "," in client_ip:
            client_ip = client_ip.split(",")[0].strip()

        with self._lock:
            now = time.monotonic()
            hits = self._counts.setdefault(client_ip, [])
            hits[:] = [t for t in hits if now - t < self.window]

            if len(hits) >= self.max_requests:
                return response.with_status(429).with_body("Too Many Requests")
            hits.append(now)

        return await next(request, response)


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@router.route("/")
async def index(request: Request, response: Response, next: Next) -> Response:
    return response.with_body("OK")


@router.route("/cats/", methods="GET,HEAD")
async def cat_list(request: Request, response: Response, next: Next) -> Response:
    return response.with_body(", ".join(CATS.values()))


@router.route("/cats/{id:int}")
async def cat_detail(request: Request, response: Response, next: Next) -> Response:
    name = CATS.get(request.get_attribute("id"))
    if name is None:
        return response.with_status(404).with_body("No such cat")
    return response.with_body(name)


@router.route("~^/cats/(?P<name>[a-z]+)$~i")
async def cat_by_name(request: Request, response: Response, next: Next) -> Response:
    wanted = request.get_attribute("name").lower()
    for cat_id, name in CATS.items():
        if name.lower() == wanted:
            return response.with_body(cat_id)
    return response.with_status(404).with_body("No such cat")


@router.route("/static/*")
async def static(request: Request, response: Response, next: Next) -> Response:
    return response.with_body(f"static file {request.path.removeprefix('/static/')}")


# ---------------------------------------------------------------------------
# Pipeline (order: first added runs first)
# ---------------------------------------------------------------------------

server.add(timing)
server.add(RateLimiter(max_requests=5, window=60.0))
server.add(router)


if __name__ == "__main__":
    for target in ("/", "/cats/", "/cats/2", "/cats/tiger", "/static/site.css", "/dogs/"):
        result = server.respond(Request(target=target))
        print(f"{target:20} {result.status} {result.text_body}")
