"""
Тесты маршрутизации: resolve / reverse и построители path / include.
"""

import pytest

from alexi.urls import (
    MissingRouteParameter,
    NoReverseMatch,
    UrlConfigurationError,
    URLPattern,
    clear_registry_cache,
    include,
    iter_named_routes,
    path,
    path_include,
    resolve,
    reverse,
)
from alexi.urls.resolver import compile_pattern, get_route_registry


def home(request, params):
    return "home"


def login(request, params):
    return "login"


def note_add(request, params):
    return "add"


def note_detail(request, params):
    return "detail"


def note_edit(request, params):
    return "edit"


def user_post(request, params):
    return "post"


@pytest.fixture
def urlpatterns():
    return [
        path("", home, name="home"),
        path("login/", login, name="login"),
        path("notes/", include([
            path("add/", note_add, name="note-add"),
            path(":id/", note_detail, name="note-detail"),
            path(":id/edit/", note_edit, name="note-edit"),
        ])),
        include("users/:user_id/", [
            path("posts/:post_id/", user_post, name="user-post"),
        ]),
    ]


class TestBuilders:

    def test_path_with_view(self):
        p = path("about/", home, name="about")
        assert p == URLPattern(pattern="about/", view=home, name="about")
        assert p.is_leaf

    def test_path_with_include(self):
        children = include([path("a/", home)])
        p = path("api/", children)

        assert p.view is None
        assert p.children == (children[0],)

    def test_include_with_route(self):
        p = include("api/", [path("a/", home)], name="api")
        assert p == path_include("api/", [path("a/", home)], name="api")

    def test_pattern_requires_exactly_one_target(self):
        with pytest.raises(UrlConfigurationError):
            URLPattern(pattern="x/")
        with pytest.raises(UrlConfigurationError):
            URLPattern(pattern="x/", view=home, children=())

    def test_path_rejects_non_callable(self):
        with pytest.raises(UrlConfigurationError):
            path("x/", "not a view")

    def test_compile_pattern(self):
        segs = compile_pattern("/users/:user_id/posts/")
        assert [(s.is_param, s.value) for s in segs] == [
            (False, "users"), (True, "user_id"), (False, "posts"),
        ]
        assert compile_pattern("") == ()


class TestResolve:

    def test_root(self, urlpatterns):
        result = resolve("/", urlpatterns)
        assert result is not None
        assert result.view is home
        assert result.name == "home"
        assert result.params == {}

    def test_empty_string_is_root(self, urlpatterns):
        assert resolve("", urlpatterns).name == "home"

    def test_extra_slashes_are_stripped(self, urlpatterns):
        result = resolve("///login///", urlpatterns)
        assert result is not None
        assert result.name == "login"

    def test_nested_param(self, urlpatterns):
        result = resolve("/notes/42/", urlpatterns)
        assert result.view is note_detail
        assert result.params == {"id": "42"}
        assert result.name == "note-detail"

    def test_literal_declared_first_wins(self, urlpatterns):
        assert resolve("/notes/add/", urlpatterns).view is note_add

    def test_declaration_order_decides(self):
        patterns = [
            path(":id/", note_detail, name="detail"),
            path("add/", note_add, name="add"),
        ]
        result = resolve("/add/", patterns)
        assert result.name == "detail"
        assert result.params == {"id": "add"}

    def test_params_accumulate_through_includes(self, urlpatterns):
        result = resolve("/users/5/posts/9/", urlpatterns)
        assert result.params == {"user_id": "5", "post_id": "9"}

    def test_leaf_requires_full_match(self, urlpatterns):
        assert resolve("/login/extra/", urlpatterns) is None

    def test_deeper_sibling_after_shorter_one(self, urlpatterns):
        result = resolve("/notes/7/edit/", urlpatterns)
        assert result.view is note_edit
        assert result.params == {"id": "7"}

    def test_no_match(self, urlpatterns):
        assert resolve("/nowhere/", urlpatterns) is None

    def test_empty_patterns(self):
        assert resolve("/", []) is None


class TestReverse:

    def test_root(self, urlpatterns):
        assert reverse("home", {}, urlpatterns) == "/"

    def test_static(self, urlpatterns):
        assert reverse("login", None, urlpatterns) == "/login/"

    def test_with_params(self, urlpatterns):
        assert reverse("note-detail", {"id": "42"}, urlpatterns) == "/notes/42/"
        assert reverse("user-post", {"user_id": 5, "post_id": 9}, urlpatterns) == "/users/5/posts/9/"

    def test_extra_params_ignored(self, urlpatterns):
        assert reverse("note-detail", {"id": "1", "unused": "x"}, urlpatterns) == "/notes/1/"

    def test_unknown_name(self, urlpatterns):
        with pytest.raises(NoReverseMatch) as exc_info:
            reverse("nope", {}, urlpatterns)
        assert exc_info.value.name == "nope"
        assert "nope" in str(exc_info.value)

    def test_missing_param(self, urlpatterns):
        with pytest.raises(MissingRouteParameter) as exc_info:
            reverse("note-detail", {}, urlpatterns)
        assert exc_info.value.param == "id"
        assert exc_info.value.route_name == "note-detail"
        assert "id" in str(exc_info.value)

    def test_first_missing_param_reported(self, urlpatterns):
        with pytest.raises(MissingRouteParameter) as exc_info:
            reverse("user-post", {}, urlpatterns)
        assert exc_info.value.param == "user_id"

    def test_first_named_pattern_wins(self):
        patterns = [
            path("first/", home, name="dup"),
            path("second/", login, name="dup"),
        ]
        assert reverse("dup", {}, patterns) == "/first/"

    @pytest.mark.parametrize("url", ["/", "/login/", "/notes/add/", "/notes/42/", "/notes/3/edit/", "/users/1/posts/2/"])
    def test_roundtrip(self, urlpatterns, url):
        result = resolve(url, urlpatterns)
        assert reverse(result.name, result.params, urlpatterns) == url

    def test_roundtrip_normalizes_slashes(self, urlpatterns):
        result = resolve("notes/42", urlpatterns)
        assert reverse(result.name, result.params, urlpatterns) == "/notes/42/"


class TestRegistryCache:

    def test_registry_cached_per_list(self, urlpatterns):
        assert get_route_registry(urlpatterns) is get_route_registry(urlpatterns)

    def test_clear_registry_cache(self, urlpatterns):
        first = get_route_registry(urlpatterns)
        urlpatterns.append(path("late/", home, name="late"))

        # Без сброса кэша новый маршрут не виден
        with pytest.raises(NoReverseMatch):
            reverse("late", {}, urlpatterns)

        clear_registry_cache()
        assert get_route_registry(urlpatterns) is not first
        assert reverse("late", {}, urlpatterns) == "/late/"

    def test_iter_named_routes(self, urlpatterns):
        routes = iter_named_routes(urlpatterns)

        assert [r.name for r in routes] == [
            "home", "login", "note-add", "note-detail", "note-edit", "user-post",
        ]
        assert routes[-1].pattern == "users/:user_id/posts/:post_id/"
        assert routes[-1].param_names == ["user_id", "post_id"]


class TestAdminStyleRoutes:
    """Параметризованный префикс модели с литеральным add/ перед :id/."""

    @pytest.fixture
    def admin_patterns(self):
        return [
            path("admin/", include([
                path(":model/add/", note_add, name="admin:model_add"),
                path(":model/:id/", note_edit, name="admin:model_change"),
            ])),
        ]

    def test_literal_add_wins_over_id(self, admin_patterns):
        result = resolve("admin/users/add", admin_patterns)

        assert result.name == "admin:model_add"
        assert result.params == {"model": "users"}
        assert "id" not in result.params

    def test_id_route(self, admin_patterns):
        result = resolve("/admin/users/5/", admin_patterns)

        assert result.name == "admin:model_change"
        assert result.params == {"model": "users", "id": "5"}

    def test_reverse_reports_missing_id(self, admin_patterns):
        with pytest.raises(MissingRouteParameter, match="'id'"):
            reverse("admin:model_change", {"model": "users"}, admin_patterns)


class TestPrefixWithoutTrailingSlash:
    """Префикс группы без завершающего слеша склеивается по сегментам."""

    @pytest.fixture
    def api_patterns(self):
        return [
            path("api", include([
                path(":id/", note_detail, name="api-detail"),
            ])),
        ]

    def test_roundtrip(self, api_patterns):
        result = resolve("/api/5/", api_patterns)

        assert result.name == "api-detail"
        assert result.params == {"id": "5"}
        assert reverse(result.name, result.params, api_patterns) == "/api/5/"

    def test_missing_param_is_reported(self, api_patterns):
        with pytest.raises(MissingRouteParameter, match="'id'"):
            reverse("api-detail", {}, api_patterns)

    def test_full_pattern_text(self, api_patterns):
        routes = iter_named_routes(api_patterns)

        assert routes[0].pattern == "api/:id/"
        assert routes[0].param_names == ["id"]


def test_registry_cache_keeps_only_last_list():
    from alexi.urls import resolver

    for _ in range(50):
        assert reverse("x", {}, [path("x/", home, name="x")]) == "/x/"

    assert len(resolver._registry_cache) == 1
