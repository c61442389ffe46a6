import logging

import pytest

from chat_api_docs.config import DocumentSettings
from chat_api_docs.document.builder import DocumentBuilder, path_placeholders, to_openapi_path
from chat_api_docs.document.fragments import body, parameter, parameters, ref, success
from chat_api_docs.document.paths import route, route_authenticated
from chat_api_docs.errors import DuplicateSchemaError, SchemaParseError

SERVER_PARAMS = parameters(parameter("server", "Server ID", ref("Id")))


def _builder(**overrides) -> DocumentBuilder:
    return DocumentBuilder(DocumentSettings(**overrides))


class TestPathHelpers:
    def test_to_openapi_path(self):
        assert to_openapi_path("/servers/:server/bans/:member") == "/servers/{server}/bans/{member}"

    def test_static_path_unchanged(self):
        assert to_openapi_path("/servers/create") == "/servers/create"

    def test_placeholders(self):
        assert path_placeholders("/servers/:server/roles/:role") == ["server", "role"]


class TestGroupsAndTags:
    def test_group_two_tags_three_resources(self):
        docs = _builder()
        docs.group("Servers")
        docs.tag("Server Information", "Query and fetch servers")
        docs.resource("/servers/:server", {
            "get": route_authenticated("Fetch Server", "Retrieve a server.", SERVER_PARAMS, success("ok")),
            "delete": route_authenticated("Delete Server", "Delete it.", SERVER_PARAMS, success("ok")),
        })
        docs.resource("/servers/create", {
            "post": route_authenticated("Create Server", "Create a new server.", success("ok")),
        })
        docs.tag("Server Members", "Find and edit server members")
        docs.resource("/servers/:server/members", {
            "get": route("Fetch Members", "Fetch all server members.", SERVER_PARAMS, success("ok")),
        })

        document = docs.to_openapi()
        assert document["x-tagGroups"] == [
            {"name": "Servers", "tags": ["Server Information", "Server Members"]}
        ]
        assert [t["name"] for t in document["tags"]] == ["Server Information", "Server Members"]
        assert list(document["paths"]) == ["/servers/{server}", "/servers/create", "/servers/{server}/members"]
        assert list(document["paths"]["/servers/{server}"]) == ["get", "delete"]
        assert list(document["paths"]["/servers/create"]) == ["post"]

    def test_tag_reregistration_overwrites(self):
        docs = _builder()
        docs.group("Servers")
        docs.tag("Server Information", "old desc")
        docs.tag("Server Information", "new desc")
        document = docs.to_openapi()
        assert document["tags"] == [{"name": "Server Information", "description": "new desc"}]
        assert document["x-tagGroups"][0]["tags"] == ["Server Information"]

    def test_group_switch(self):
        docs = _builder()
        docs.group("Servers")
        docs.tag("Server Information", "a")
        docs.group("Users")
        docs.tag("User Information", "b")
        assert docs.groups == {"Servers": ["Server Information"], "Users": ["User Information"]}

    def test_tag_without_group(self):
        docs = _builder()
        docs.tag("Misc", "Miscellaneous")
        assert "x-tagGroups" not in docs.to_openapi()

    def test_resource_gets_current_tag(self):
        docs = _builder()
        docs.tag("Server Bans", "Bans")
        docs.resource("/servers/:server/bans", {"get": route("Fetch Bans", "Fetch.", SERVER_PARAMS)})
        assert docs.resources["/servers/:server/bans"]["get"].tags == ["Server Bans"]


class TestResources:
    def test_unsupported_method(self):
        docs = _builder()
        with pytest.raises(ValueError):
            docs.resource("/servers", {"head": route("Head", "Head.")})

    def test_unsupported_method_registers_nothing(self):
        docs = _builder()
        with pytest.raises(ValueError):
            docs.resource("/servers", {
                "get": route("Get", "Get.", success("ok")),
                "head": route("Head", "Head."),
            })
        assert docs.resources == {}
        assert docs.to_openapi()["paths"] == {}

    def test_unsupported_method_keeps_earlier_operations(self):
        docs = _builder()
        docs.resource("/servers", {"get": route("Get", "Get.", success("ok"))})
        with pytest.raises(ValueError):
            docs.resource("/servers", {"post": route("Post", "Post."), "head": route("Head", "Head.")})
        assert list(docs.resources["/servers"]) == ["get"]

    def test_method_names_normalized(self):
        docs = _builder()
        docs.resource("/servers/create", {"POST": route("Create", "Create.")})
        assert list(docs.resources["/servers/create"]) == ["post"]

    def test_duplicate_method_last_wins(self, caplog):
        docs = _builder()
        docs.resource("/servers/create", {"post": route("First", "First.")})
        with caplog.at_level(logging.WARNING):
            docs.resource("/servers/create", {"post": route("Second", "Second.")})
        assert docs.resources["/servers/create"]["post"].summary == "Second"
        assert "declared twice" in caplog.text

    def test_methods_accumulate_across_calls(self):
        docs = _builder()
        docs.resource("/servers/:server", {"get": route("Get", "Get.", SERVER_PARAMS)})
        docs.resource("/servers/:server", {"delete": route("Delete", "Delete.", SERVER_PARAMS)})
        assert set(docs.resources["/servers/:server"]) == {"get", "delete"}


class TestSchemas:
    def test_schema_registers_and_returns_ref(self):
        docs = _builder()
        result = docs.schema("interface RoleData { name: string; }")
        assert result == ref("RoleData")
        assert docs.schemas["RoleData"]["required"] == ["name"]

    def test_identical_reregistration_allowed(self):
        docs = _builder()
        docs.schema("type Id = string;")
        docs.schema("type Id = string;")
        assert list(docs.schemas) == ["Id"]

    def test_conflicting_schema_name(self):
        docs = _builder()
        docs.schema("type Id = string;")
        with pytest.raises(DuplicateSchemaError):
            docs.schema("type Id = number;")

    def test_parse_error_propagates(self):
        docs = _builder()
        with pytest.raises(SchemaParseError):
            docs.schema("interface Broken { name }")
        assert docs.schemas == {}


class TestBuilderRoutes:
    def test_strict_setting_applied(self):
        docs = _builder(strict_fragments=False)
        op = docs.route("Edit", "Edit.", success("a"), success("b"))
        assert op.responses["200"].description == "b"

    def test_authenticated_route(self):
        docs = _builder()
        assert docs.route_authenticated("Fetch", "Fetch.").authenticated is True
        assert docs.route("Fetch", "Fetch.").authenticated is False


class TestValidate:
    def test_clean_document(self):
        docs = _builder()
        docs.schema("type Id = string;")
        docs.resource("/servers/:server", {"get": route("Get", "Get.", SERVER_PARAMS, success("ok"))})
        assert docs.validate() == []

    def test_missing_parameter(self):
        docs = _builder()
        docs.schema("type Id = string;")
        docs.resource("/servers/:server/members/:member", {
            "delete": route("Kick", "Kick.", SERVER_PARAMS, success("ok")),
        })
        issues = docs.validate()
        assert issues == ["DELETE /servers/:server/members/:member: no parameter declared for ':member'"]

    def test_parameter_not_in_path(self):
        docs = _builder()
        docs.schema("type Id = string;")
        docs.resource("/servers/create", {"post": route("Create", "Create.", SERVER_PARAMS, success("ok"))})
        assert docs.validate() == ["POST /servers/create: parameter 'server' is not in the path"]

    def test_operation_without_responses(self):
        docs = _builder()
        docs.schema("type Id = string;")
        docs.resource("/servers/:server", {"delete": route("Delete", "Delete.", SERVER_PARAMS)})
        assert docs.validate() == ["DELETE /servers/:server: no responses declared"]

    def test_unregistered_ref(self):
        docs = _builder()
        docs.resource("/servers/:server", {
            "get": route("Get", "Get.", SERVER_PARAMS, success("ok", ref("Server"))),
        })
        issues = docs.validate()
        assert "Reference to unregistered schema 'Id'" in issues
        assert "Reference to unregistered schema 'Server'" in issues

    def test_refs_inside_schemas_checked(self):
        docs = _builder()
        docs.schema("type ServerBans = Ban[];")
        assert docs.validate() == ["Reference to unregistered schema 'Ban'"]


class TestToOpenapi:
    def test_info_and_components(self):
        docs = _builder(title="Test API", version="1.2.3", session_header="x-token")
        docs.schema("type Id = string;")
        document = docs.to_openapi()
        assert document["openapi"] == "3.0.3"
        assert document["info"]["title"] == "Test API"
        assert document["info"]["version"] == "1.2.3"
        assert document["components"]["schemas"] == {"Id": {"type": "string"}}
        assert document["components"]["securitySchemes"]["Session Token"] == {
            "type": "apiKey",
            "in": "header",
            "name": "x-token",
        }

    def test_servers_only_when_configured(self):
        assert "servers" not in _builder().to_openapi()
        document = _builder(server_url="https://api.example.com").to_openapi()
        assert document["servers"] == [{"url": "https://api.example.com"}]

    def test_security_on_authenticated_operations(self):
        docs = _builder()
        docs.resource("/servers/:server", {
            "get": route_authenticated("Get", "Get.", SERVER_PARAMS),
            "put": route("Put", "Put.", SERVER_PARAMS, body("Data", ref("Id"))),
        })
        paths = docs.to_openapi()["paths"]["/servers/{server}"]
        assert paths["get"]["security"] == [{"Session Token": []}]
        assert "security" not in paths["put"]
        assert paths["put"]["requestBody"]["content"]["application/json"]["schema"] == ref("Id")
