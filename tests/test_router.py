"""Tests for waypoint.routing.router: resolution order, variables, and dispatch."""

import threading

import pytest

from waypoint.http.request import Request
from waypoint.http.response import Response
from waypoint.routing.route import PrefixRoute, RouteType, StaticRoute, TemplateRoute
from waypoint.routing.router import Router


async def _fail_next(request: Request, response: Response) -> Response:
    msg = "next should not have been called"
    raise AssertionError(msg)


def _responder(body: str):
    async def respond(request: Request, response: Response, next) -> Response:
        return response.with_body(body)

    return respond


async def _echo_attributes(request: Request, response: Response, next) -> Response:
    items = ",".join(f"{k}={v}" for k, v in sorted(request.attributes.items()))
    return response.with_body(items)


def _target(router: Router, path: str) -> str | None:
    match = router.resolve(path)
    return match.route.target if match else None


class TestRegistration:
    def test_register_is_chainable(self) -> None:
        router = Router()
        assert router.register("GET", "/", _responder("x")) is router

    def test_same_target_reuses_route(self) -> None:
        router = Router()
        get_mw, post_mw = _responder("get"), _responder("post")
        router.register("GET", "/cats/", get_mw)
        router.register("POST", "/cats/", post_mw)

        assert len(router) == 1
        route = router.routes[0]
        assert route.method_map.get_middleware("GET") is get_mw
        assert route.method_map.get_middleware("POST") is post_mw

    def test_reregister_overwrites_method(self) -> None:
        router = Router()
        second = _responder("second")
        router.register("GET", "/", _responder("first")).register("GET", "/", second)
        assert router.routes[0].method_map.get_middleware("GET") is second

    def test_routes_in_registration_order(self) -> None:
        router = Router()
        for target in ("/b", "/a/*", "/c/{id}", "/a"):
            router.register("GET", target, _responder(target))
        assert [r.target for r in router.routes] == ["/b", "/a/*", "/c/{id}", "/a"]
        assert [type(r) for r in router] == [StaticRoute, PrefixRoute, TemplateRoute, StaticRoute]

    def test_contains_raw_target(self) -> None:
        router = Router().register("GET", "/cats/*", _responder("x"))
        assert "/cats/*" in router
        assert "/cats/" not in router

    def test_route_decorator(self) -> None:
        router = Router()

        @router.route("/cats/{id}", methods="GET,HEAD")
        async def cat(request: Request, response: Response, next) -> Response:
            return response

        route = router.routes[0]
        assert route.method_map.get_middleware("HEAD") is cat
        assert cat.__name__ == "cat"

    def test_concurrent_registration_of_same_target(self) -> None:
        router = Router()
        barrier = threading.Barrier(8)

        def worker(i: int) -> None:
            barrier.wait()
            router.register(f"M{i}", "/shared/{id}", _responder(str(i)))

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(router) == 1
        assert len(router.routes[0].method_map) == 8


class TestStaticResolution:
    def test_exact_only(self) -> None:
        router = Router()
        for target in ("/", "/cats", "/cats/"):
            router.register("GET", target, _responder(target))

        for target in ("/", "/cats", "/cats/"):
            assert _target(router, target) == target
            assert _target(router, target + "x") is None

    def test_empty_router(self) -> None:
        assert Router().resolve("/") is None
        assert Router().resolve("/anything/at/all") is None


class TestPrefixResolution:
    def test_longest_prefix_wins(self) -> None:
        router = Router()
        router.register("GET", "/a/*", _responder("a"))
        router.register("GET", "/a/b/*", _responder("ab"))

        assert _target(router, "/a/b/c") == "/a/b/*"
        assert _target(router, "/a/x") == "/a/*"

    def test_longest_prefix_wins_regardless_of_order(self) -> None:
        router = Router()
        router.register("GET", "/a/b/*", _responder("ab"))
        router.register("GET", "/a/*", _responder("a"))

        assert _target(router, "/a/b/c") == "/a/b/*"
        assert _target(router, "/a/c") == "/a/*"

    def test_root_wildcard(self) -> None:
        router = Router().register("GET", "/*", _responder("any"))
        assert _target(router, "/whatever/deep") == "/*"

    def test_no_match(self) -> None:
        router = Router().register("GET", "/a/*", _responder("a"))
        assert _target(router, "/b/") is None
        assert _target(router, "/a") is None


class TestPatternResolution:
    def test_template_variables(self) -> None:
        router = Router().register("GET", "/cats/{id}", _responder("cat"))
        match = router.resolve("/cats/42")
        assert match is not None
        assert dict(match.path_variables) == {"id": "42"}
        assert router.resolve("/cats/42/toys") is None

    def test_first_registered_pattern_wins(self) -> None:
        router = Router()
        router.register("GET", "/cats/{id}", _responder("template"))
        router.register("GET", "~^/cats/(\\d+)$~", _responder("regex"))
        assert _target(router, "/cats/7") == "/cats/{id}"

        router = Router()
        router.register("GET", "~^/cats/(\\d+)$~", _responder("regex"))
        router.register("GET", "/cats/{id}", _responder("template"))
        assert _target(router, "/cats/7") == "~^/cats/(\\d+)$~"

    def test_later_pattern_used_when_earlier_misses(self) -> None:
        router = Router()
        router.register("GET", "/cats/{id:int}", _responder("by-id"))
        router.register("GET", "/cats/{name}", _responder("by-name"))
        assert _target(router, "/cats/7") == "/cats/{id:int}"
        assert _target(router, "/cats/molly") == "/cats/{name}"


class TestPriority:
    def test_static_beats_prefix_and_pattern(self) -> None:
        router = Router()
        router.register("GET", "/cats/{id}", _responder("pattern"))
        router.register("GET", "/cats/*", _responder("prefix"))
        router.register("GET", "/cats/new", _responder("static"))
        assert _target(router, "/cats/new") == "/cats/new"

    def test_prefix_beats_pattern(self) -> None:
        router = Router()
        router.register("GET", "/cats/{id}", _responder("pattern"))
        router.register("GET", "/cats/*", _responder("prefix"))
        assert _target(router, "/cats/42") == "/cats/*"

    def test_route_kinds(self) -> None:
        router = Router()
        router.register("GET", "/s", _responder("s"))
        router.register("GET", "/p/*", _responder("p"))
        router.register("GET", "/t/{x}", _responder("t"))
        assert [r.type for r in router.routes] == [RouteType.STATIC, RouteType.PREFIX, RouteType.PATTERN]


class TestDispatch:
    @pytest.mark.anyio
    async def test_not_found(self) -> None:
        response = await Router()(Request(target="/nope"), Response(), _fail_next)
        assert response.status == 404

    @pytest.mark.anyio
    async def test_static_dispatch(self) -> None:
        router = Router().register("GET", "/", _responder("home"))
        response = await router(Request(target="/"), Response(), _fail_next)
        assert response.status == 200
        assert response.body == "home"

    @pytest.mark.anyio
    async def test_query_string_ignored(self) -> None:
        router = Router().register("GET", "/search", _responder("results"))
        response = await router(Request(target="/search?q=cats#top"), Response(), _fail_next)
        assert response.body == "results"

    @pytest.mark.anyio
    async def test_absolute_form_target(self) -> None:
        router = Router().register("GET", "/cats", _responder("cats"))
        response = await router(Request(target="http://host/cats?x=1"), Response(), _fail_next)
        assert response.status == 200
        assert response.body == "cats"

    @pytest.mark.anyio
    async def test_method_not_allowed(self) -> None:
        router = Router().register("GET", "/", _responder("home"))
        response = await router(Request(method="DELETE", target="/"), Response(), _fail_next)
        assert response.status == 405
        assert response.header("Allow") == "GET, HEAD, OPTIONS"

    @pytest.mark.anyio
    async def test_variables_as_attributes(self) -> None:
        router = Router().register("GET", "/owners/{owner}/cats/{cat}", _echo_attributes)
        response = await router(Request(target="/owners/ada/cats/molly"), Response(), _fail_next)
        assert response.body == "cat=molly,owner=ada"

    @pytest.mark.anyio
    async def test_regex_variables_as_attributes(self) -> None:
        router = Router().register("GET", "~^/cats/(?P<id>\\d+)/(\\w+)$~", _echo_attributes)
        response = await router(Request(target="/cats/3/toys"), Response(), _fail_next)
        assert response.body == "2=toys,id=3"

    @pytest.mark.anyio
    async def test_variables_under_single_attribute(self) -> None:
        async def show(request: Request, response: Response, next) -> Response:
            return response.with_body(repr(request.get_attribute("path_vars")))

        router = Router(path_variables_attribute="path_vars")
        router.register("GET", "/cats/{id}", show)
        response = await router(Request(target="/cats/42"), Response(), _fail_next)
        assert response.body == "{'id': '42'}"

    @pytest.mark.anyio
    async def test_no_variable_attributes_for_static(self) -> None:
        router = Router(path_variables_attribute="path_vars")
        router.register("GET", "/cats", _echo_attributes)
        response = await router(Request(target="/cats"), Response(), _fail_next)
        assert response.body == ""

    @pytest.mark.anyio
    async def test_next_passed_to_route_middleware(self) -> None:
        async def passthrough(request: Request, response: Response, next) -> Response:
            return await next(request, response.with_header("X-Route", "1"))

        async def after(request: Request, response: Response) -> Response:
            return response.with_body("after")

        router = Router().register("*", "/*", passthrough)
        response = await router(Request(target="/x"), Response(), after)
        assert response.body == "after"
        assert response.header("X-Route") == "1"

    @pytest.mark.anyio
    async def test_handle_entry_point(self) -> None:
        router = Router().register("GET", "/cats/{id}", _echo_attributes)
        response = await router.handle(Request(target="/cats/9"))
        assert response.body == "id=9"

    @pytest.mark.anyio
    async def test_handle_not_found(self) -> None:
        response = await Router().handle(Request(target="/"))
        assert response.status == 404

    @pytest.mark.anyio
    async def test_handle_continuation_returns_response_unchanged(self) -> None:
        async def passthrough(request: Request, response: Response, next) -> Response:
            return await next(request, response.with_body("kept"))

        router = Router().register("GET", "/", passthrough)
        response = await router.handle(Request(target="/"), Response(status=201))
        assert response.status == 201
        assert response.body == "kept"

    @pytest.mark.anyio
    async def test_routers_compose_in_a_stack(self) -> None:
        from waypoint.dispatching.stack import DispatchStack

        api = Router().register("GET", "/api/*", _responder("api"))
        site = Router().register("GET", "/", _responder("site"))

        async def api_or_site(request: Request, response: Response, next) -> Response:
            if request.path.startswith("/api/"):
                return await api(request, response, next)
            return await site(request, response, next)

        stack = DispatchStack([api_or_site])
        assert (await stack(Request(target="/api/x"), Response(), _fail_next)).body == "api"
        assert (await stack(Request(target="/"), Response(), _fail_next)).body == "site"
