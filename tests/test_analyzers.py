"""Tests for the class-based analyzers against the sample application."""

import dataclasses
import json
from types import SimpleNamespace
from unittest.mock import Mock

import pytest

from pytest_scaffold_mcp.core.analyzer import (
    AdminResourceAnalyzer,
    ComponentAnalyzer,
    ControllerAnalyzer,
    ModelAnalyzer,
    ModuleEnvironment,
    StarletteRouteTable,
    StaticEnvironment,
    StaticRouteTable,
    SubjectKind,
)
from pytest_scaffold_mcp.core.analyzer.discovery import discover_classes
from pytest_scaffold_mcp.core.analyzer.models import EventInfo, ListenerInfo, ModelDescriptor, RouteInfo
from pytest_scaffold_mcp.core.analyzer.routes import load_route_table, route_table_from
from pytest_scaffold_mcp.core.errors import NotFoundError, TypeKindMismatchError

from sample_app.framework import Component, Controller, Model
from sample_app.models import Post, Role, User


# =============================================================================
# Model Analyzer Tests
# =============================================================================

class TestModelAnalyzer:
    """Tests for ModelAnalyzer."""

    @pytest.fixture
    def analyzer(self, profile):
        return ModelAnalyzer(profile)

    def test_conventions(self, analyzer):
        """Table, key and attribute conventions are read from the class."""
        d = analyzer.analyze("sample_app.models.User")

        assert d.qualified_name == "sample_app.models.User"
        assert d.short_name == "User"
        assert d.namespace == "sample_app.models"
        assert d.table == "users"
        assert d.primary_key == "id"
        assert d.incrementing is True
        assert d.fillable == ("name", "email", "password")
        assert d.hidden == ("password",)
        assert d.kind == SubjectKind.MODEL

    def test_casts_include_incrementing_key(self, analyzer):
        """An incrementing key is cast to the key type ahead of declared casts."""
        d = analyzer.analyze(User)
        assert d.casts == {"id": "int", "email_verified_at": "datetime", "is_admin": "bool"}
        assert list(d.casts)[0] == "id"

    def test_timestamps_add_dates(self, analyzer):
        """Timestamped models list the timestamp columns as dates."""
        assert analyzer.analyze(User).dates == ("created_at", "updated_at")
        assert analyzer.analyze(Role).dates == ()

    def test_non_incrementing_key(self, analyzer):
        """Models with their own keys get no implied cast."""
        d = analyzer.analyze(Role)
        assert d.primary_key == "slug"
        assert d.incrementing is False
        assert d.key_type == "str"
        assert d.timestamps is False
        assert d.casts == {}

    def test_explicit_table_name(self, analyzer):
        """__tablename__ wins over the pluralized class name."""
        assert analyzer.analyze(Post).table == "posts"

    def test_relationships_from_annotation_and_probe(self, analyzer):
        """Annotated and unannotated relation methods are both found."""
        relations = {r.name: r for r in analyzer.analyze(User).relationships}

        assert set(relations) == {"posts", "role"}
        assert relations["posts"].kind == "HasMany"
        assert relations["posts"].related == "sample_app.models.Post"
        assert relations["role"].kind == "BelongsTo"
        assert relations["role"].related == "sample_app.models.Role"

    def test_methods_needing_arguments_are_not_relationships(self, analyzer):
        """Methods with required parameters and non-relations are ignored."""
        names = {r.name for r in analyzer.analyze(User).relationships}
        assert "greeting" not in names
        assert "display_name" not in names

    def test_relation_candidate_whose_call_raises_is_skipped(self, analyzer):
        """An unannotated method that raises when called is not a relationship."""
        d = analyzer.analyze(User)

        assert "last_login" not in {r.name for r in d.relationships}
        assert {r.name for r in d.relationships} == {"posts", "role"}

    def test_scopes(self, analyzer):
        """scope_* methods are scopes; the query parameter is dropped."""
        scopes = {s.name: s for s in analyzer.analyze(User).scopes}

        assert set(scopes) == {"active", "of_type", "recent", "named"}
        assert scopes["active"].method == "scope_active"
        assert scopes["active"].parameters == ()
        assert [p.name for p in scopes["of_type"].parameters] == ["type_name"]

    def test_class_and_static_scopes(self, analyzer):
        """Bound and unbound scopes report only the parameters after the query."""
        scopes = {s.name: s for s in analyzer.analyze(User).scopes}

        assert [p.name for p in scopes["recent"].parameters] == ["days"]
        assert scopes["recent"].parameters[0].default_value == "7"
        assert [p.name for p in scopes["named"].parameters] == ["name"]

    def test_mixin_flags(self, analyzer):
        """UUID keys and factories are detected from mixins."""
        user = analyzer.analyze(User)
        post = analyzer.analyze(Post)

        assert user.has_uuid is True
        assert user.has_factory is True
        assert post.has_uuid is False
        assert [m.name for m in user.mixins] == ["HasUuids", "Notifiable", "Auditable", "HasFactory"]

    def test_validation_rules_normalized(self, analyzer):
        """List rules are joined with '|'."""
        assert analyzer.analyze(User).validation_rules == {
            "name": "required|max:255",
            "email": "required|email",
        }

    def test_to_dict(self, analyzer):
        """Descriptors serialize with their kind."""
        data = analyzer.analyze(User).to_dict()
        assert data["kind"] == "model"
        assert data["relationships"][0]["name"] == "posts"

    def test_mappings_are_read_only(self, analyzer):
        """Descriptor mappings cannot be changed after analysis."""
        d = analyzer.analyze(User)

        with pytest.raises(TypeError):
            d.casts["is_admin"] = "str"
        with pytest.raises(TypeError):
            d.validation_rules["name"] = "nullable"
        assert d.casts["is_admin"] == "bool"

    def test_mappings_copied_from_input(self):
        """Mutating the dict a descriptor was built from leaves it untouched."""
        rules = {"title": "required"}
        d = ModelDescriptor("app.Post", "Post", "app", "posts", validation_rules=rules)
        rules["title"] = "nullable"

        assert d.validation_rules == {"title": "required"}
        assert dataclasses.replace(d, validation_rules={}).validation_rules == {}

    def test_to_dict_is_json_ready(self, analyzer):
        """Read-only mappings come out of to_dict as plain dicts."""
        data = analyzer.analyze(User).to_dict()

        assert type(data["casts"]) is dict
        assert json.loads(json.dumps(data))["validation_rules"]["name"] == "required|max:255"

    def test_not_found(self, analyzer):
        """Unknown identifiers raise NotFoundError."""
        with pytest.raises(NotFoundError):
            analyzer.analyze("sample_app.models.Ghost")

    def test_kind_mismatch(self, analyzer):
        """A controller is not a model."""
        with pytest.raises(TypeKindMismatchError):
            analyzer.analyze("sample_app.controllers.user.UserController")


# =============================================================================
# Controller Analyzer Tests
# =============================================================================

class TestControllerAnalyzer:
    """Tests for ControllerAnalyzer."""

    @pytest.fixture
    def analyzer(self, profile):
        return ControllerAnalyzer(profile)

    def test_resourceful_controller(self, analyzer):
        """Routes, model guess, middleware and flags for a resource controller."""
        d = analyzer.analyze("sample_app.controllers.user.UserController")

        assert d.is_resourceful is True
        assert d.is_api is False
        assert d.model == "sample_app.models.User"
        assert d.middleware == ("auth", "verified")
        assert [m.name for m in d.methods] == [
            "index", "create", "store", "show", "edit", "update", "destroy", "export",
        ]

    def test_routes_bound_by_action(self, analyzer):
        """Only routes whose action is one of the controller's methods are kept."""
        d = analyzer.analyze("sample_app.controllers.user.UserController")

        assert [r.action for r in d.routes] == ["index", "store", "show", "update", "destroy"]
        assert d.routes[0].uri == "/users"
        assert d.routes[0].methods == ("GET", "HEAD")
        assert d.routes[3].methods == ("PUT", "PATCH")

    def test_api_controller(self, analyzer):
        """API namespace, declared model and instance middleware."""
        d = analyzer.analyze("sample_app.controllers.api.post.PostController")

        assert d.is_api is True
        assert d.is_resourceful is False
        assert d.model == "sample_app.models.Post"
        assert d.middleware == ("auth:api", "throttle:60,1")
        assert [r.uri for r in d.routes] == ["/api/posts", "/api/posts", "/api/posts/{post}"]

    def test_is_api_attribute_wins(self, analyzer):
        """A boolean is_api attribute overrides naming heuristics."""
        class ApiReportController(Controller):
            is_api = False

        class ReportController(Controller):
            is_api = True

        assert analyzer.analyze(ApiReportController).is_api is False
        assert analyzer.analyze(ReportController).is_api is True

    def test_api_by_name(self, analyzer):
        """'Api' in the class name marks an API controller."""
        class ApiStatsController(Controller):
            def index(self):
                return []

        d = analyzer.analyze(ApiStatsController)
        assert d.is_api is True
        assert d.model is None
        assert d.routes == ()

    def test_injected_route_table(self, profile):
        """A supplied route table replaces the configured one."""
        table = StaticRouteTable([{
            "uri": "/people/{id}",
            "methods": "get",
            "action": "sample_app.controllers.user.UserController.show",
        }])
        d = ControllerAnalyzer(profile, table).analyze("sample_app.controllers.user.UserController")

        assert d.routes == (RouteInfo(uri="/people/{id}", methods=("GET",), name=None, action="show"),)

    def test_kind_mismatch(self, analyzer):
        """A model is not a controller."""
        with pytest.raises(TypeKindMismatchError):
            analyzer.analyze("sample_app.models.User")


class TestRouteTables:
    """Tests for route table adapters."""

    def test_starlette_adapter(self):
        """path/methods/name/endpoint are read from app.routes."""
        def endpoint():
            pass

        app = SimpleNamespace(routes=[
            SimpleNamespace(path="/ping", methods={"GET", "HEAD"}, name="ping", endpoint=endpoint),
            SimpleNamespace(path="/static", name="static"),
        ])
        routes = StarletteRouteTable(app).routes()

        assert len(routes) == 1
        assert routes[0].uri == "/ping"
        assert routes[0].methods == ("GET", "HEAD")
        assert routes[0].action.endswith("endpoint")

    def test_route_table_from(self):
        """Lists become static tables, apps are adapted, tables pass through."""
        table = StaticRouteTable()
        assert route_table_from(table) is table
        assert isinstance(route_table_from([]), StaticRouteTable)
        assert isinstance(route_table_from(SimpleNamespace(routes=[])), StarletteRouteTable)

    def test_missing_route_table_is_empty(self):
        """A route path that does not resolve yields no routes."""
        assert load_route_table("sample_app.routes.MISSING").routes() == []
        assert load_route_table(None).routes() == []


# =============================================================================
# Component Analyzer Tests
# =============================================================================

class TestComponentAnalyzer:
    """Tests for ComponentAnalyzer."""

    @pytest.fixture
    def analyzer(self, profile):
        return ComponentAnalyzer(profile)

    def test_properties(self, analyzer):
        """Public annotated attributes are properties; ClassVars are not."""
        d = analyzer.analyze("sample_app.components.Counter")

        assert [p.name for p in d.properties] == ["count", "step"]
        assert d.properties[0].type_hint == "int"
        assert d.properties[0].default_value == "0"

    def test_name_defaults_to_kebab(self, analyzer):
        """Without get_name the component name is the kebab-cased class name."""
        assert analyzer.analyze("sample_app.components.Counter").name == "counter"
        assert analyzer.analyze("sample_app.components.SearchBox").name == "search"

    def test_events(self, analyzer):
        """Emitted events are found; a later emitter replaces an earlier one."""
        d = analyzer.analyze("sample_app.components.Counter")
        assert d.events == (
            EventInfo(name="counted", method="reset"),
            EventInfo(name="counter-reset", method="reset"),
        )

    def test_listeners(self, analyzer):
        """Listeners come from the attribute or get_listeners()."""
        counter = analyzer.analyze("sample_app.components.Counter")
        search = analyzer.analyze("sample_app.components.SearchBox")

        assert counter.listeners == (ListenerInfo(event="reset-all", handler="reset"),)
        assert search.listeners == (ListenerInfo(event="clear", handler="clear"),)

    def test_rules_and_query_string(self, analyzer):
        """Validation rules and query string bindings are read."""
        d = analyzer.analyze("sample_app.components.Counter")
        assert d.validation_rules == {"step": "integer|min:1"}
        assert d.query_string == ("count",)

    def test_custom_detector(self, profile):
        """The emission detector can be replaced."""
        class FixedDetector:
            def detect(self, func):
                return [f"{func.__name__}-done"]

        d = ComponentAnalyzer(profile, FixedDetector()).analyze("sample_app.components.SearchBox")
        assert [e.name for e in d.events] == ["get_name-done", "get_listeners-done", "clear-done"]

    def test_survey_not_installed(self, analyzer):
        """Without the capability the survey reports it instead of failing."""
        survey = analyzer.survey(StaticEnvironment())
        assert survey.installed is False
        assert survey.subjects == ()

    def test_survey(self, analyzer):
        """Every component in the package is analyzed."""
        survey = analyzer.survey(StaticEnvironment({"components"}))
        assert survey.installed is True
        assert {s.short_name for s in survey.subjects} == {"Counter", "SearchBox"}


# =============================================================================
# Admin Resource Analyzer Tests
# =============================================================================

class TestAdminResourceAnalyzer:
    """Tests for AdminResourceAnalyzer."""

    @pytest.fixture
    def analyzer(self, profile):
        return AdminResourceAnalyzer(profile)

    def test_model_guessed_from_name(self, analyzer):
        """UserResource manages the User model."""
        d = analyzer.analyze("sample_app.admin.resources.UserResource")
        assert d.model == "sample_app.models.User"
        assert d.navigation_group == "Accounts"

    def test_declared_model(self, analyzer):
        """A declared model string is used as is."""
        d = analyzer.analyze("sample_app.admin.resources.PostResource")
        assert d.model == "sample_app.models.Post"

    def test_missing_model(self, analyzer):
        """A resource with no determinable model cannot be analyzed."""
        with pytest.raises(NotFoundError):
            analyzer.analyze("sample_app.admin.resources.ArchiveResource")

    def test_form_fields_flatten_layouts(self, analyzer):
        """Fields inside layout sections are reported with their flags."""
        d = analyzer.analyze("sample_app.admin.resources.UserResource")
        fields = {f.name: f for f in d.form_fields}

        assert list(fields) == ["name", "email", "is_admin"]
        assert fields["name"].type == "TextInput"
        assert fields["name"].required is True
        assert fields["email"].label == "Email address"
        assert fields["is_admin"].required is False

    def test_table_columns(self, analyzer):
        """Sortable and searchable flags are read."""
        d = analyzer.analyze("sample_app.admin.resources.UserResource")
        columns = {c.name: c for c in d.table_columns}

        assert columns["name"].sortable is True
        assert columns["name"].searchable is True
        assert columns["email"].sortable is False

    def test_pages(self, analyzer):
        """Pages are keyed as registered."""
        d = analyzer.analyze("sample_app.admin.resources.UserResource")

        assert list(d.pages) == ["index", "create", "edit", "view"]
        assert d.pages["index"].short_name == "ListUsers"
        assert d.pages["index"].qualified_name == "sample_app.admin.pages.ListUsers"

    def test_survey_skips_unanalyzable(self, analyzer):
        """Resources that fail analysis are listed as skipped."""
        survey = analyzer.survey(StaticEnvironment({"admin"}))

        assert {s.short_name for s in survey.subjects} == {"UserResource", "PostResource"}
        assert "sample_app.admin.resources.ArchiveResource" in survey.skipped

    def test_survey_not_installed(self, analyzer):
        """No admin panel, nothing to survey."""
        assert analyzer.survey(StaticEnvironment()).installed is False

    def test_relationships_of_managed_model(self, analyzer):
        """The View page needs the relations of the model a resource manages."""
        d = analyzer.analyze("sample_app.admin.resources.UserResource")
        assert {r.name for r in d.relationships} == {"posts", "role"}

    def test_relationships_empty_when_model_unanalyzable(self, profile):
        """A model that cannot be analyzed leaves the resource without relationships."""
        broken = Mock(spec=ModelAnalyzer)
        broken.analyze.side_effect = NotFoundError("sample_app.models.Post")
        analyzer = AdminResourceAnalyzer(profile, model_analyzer=broken)

        d = analyzer.analyze("sample_app.admin.resources.PostResource")

        assert d.model == "sample_app.models.Post"
        assert d.relationships == ()

    def test_survey_lists_panels(self, analyzer):
        """Panel providers are read from panel() or, failing that, the class."""
        panels = {p.name: p for p in analyzer.survey(StaticEnvironment({"admin"})).panels}

        assert list(panels) == ["Admin", "Reports"]
        assert panels["Admin"].path == "admin"
        assert panels["Admin"].resources == (
            "sample_app.admin.resources.UserResource",
            "sample_app.admin.resources.PostResource",
        )
        assert panels["Admin"].pages == ("sample_app.admin.pages.PostActivity",)
        assert panels["Admin"].widgets == ("sample_app.admin.panels.SignupsChart",)
        assert panels["Reports"].path == "reports"
        assert panels["Reports"].resources == ("sample_app.admin.resources.PostResource",)

    def test_no_panels_package(self, profile):
        """A missing panels package means no panels, not a failed survey."""
        analyzer = AdminResourceAnalyzer(dataclasses.replace(profile, panels_package="sample_app.missing"))
        survey = analyzer.survey(StaticEnvironment({"admin"}))

        assert survey.installed is True
        assert survey.panels == ()
        assert survey.to_dict()["panels"] == []


# =============================================================================
# Capability and Discovery Tests
# =============================================================================

class TestEnvironment:
    """Tests for capability detection."""

    def test_module_environment(self):
        """A capability exists when its module can be found."""
        env = ModuleEnvironment({"components": "sample_app.components", "admin": "no_such_pkg.admin"})
        assert env.has_capability("components") is True
        assert env.has_capability("admin") is False
        assert env.has_capability("unknown") is False


class TestDiscovery:
    """Tests for class discovery."""

    def test_discovers_models_defined_in_package(self):
        """Only subclasses defined in the scanned modules are returned."""
        assert discover_classes("sample_app.models", Model) == [Post, Role, User]

    def test_discovers_in_subpackages(self):
        """Submodules are walked."""
        names = {c.__name__ for c in discover_classes("sample_app.controllers", Controller)}
        assert names == {"UserController", "PostController"}

    def test_nothing_of_other_kind(self):
        """No components live in the models module."""
        assert discover_classes("sample_app.models", Component) == []

    def test_missing_package(self):
        """An unimportable package raises NotFoundError."""
        with pytest.raises(NotFoundError):
            discover_classes("no_such_package", Model)
