"""Pytest configuration and fixtures for jbschema tests."""

import pytest

from jbschema import DictLoader, SchemaCompiler, TemplateCompiler

VIEWS = {
    "api/users/show.json.jbuilder": """\
# @openapi_operation summary:"Show user" tags:[Users] status:200
# @openapi id:integer description:"User ID"
json.id @user.id
# @openapi name:string description:"Full name"
json.name @user.name
# @openapi created_at:date-time
json.created_at @user.created_at
""",
    "api/users/index.json.jbuilder": """\
json.array! @users do |user|
  # @openapi id:integer
  json.id user.id
  json.partial! "api/users/profile", user: user
end
""",
    "api/users/_profile.json.jbuilder": """\
# @openapi email:string format:email
json.email user.email
# @openapi bio:string required:false
json.bio user.bio
""",
    "api/orders/show.json.jbuilder": """\
# @openapi number:string
json.number @order.number
# @openapi shipping:object description:"Shipping address"
json.shipping do
  json.partial! "api/shared/address", address: @order.shipping_address
end
""",
    "api/shared/_address.json.jbuilder": """\
# @openapi street:string
json.street address.street
# @openapi city:string
json.city address.city
""",
    "api/loops/_a.json.jbuilder": """\
# @openapi a:string
json.a 1
json.partial! "api/loops/b"
""",
    "api/loops/_b.json.jbuilder": """\
# @openapi b:string
json.b 2
json.partial! "api/loops/a"
""",
}


@pytest.fixture
def loader():
    """DictLoader with a small set of annotated Jbuilder views."""
    return DictLoader(dict(VIEWS))


@pytest.fixture
def compiler(loader):
    """TemplateCompiler over the shared views."""
    return TemplateCompiler(loader)


@pytest.fixture
def compile_schema():
    """Compile Jbuilder source straight to its schema mapping.

    Extra templates (partials) may be passed as keyword ``views``.
    """

    def _compile(source: str, views: dict[str, str] | None = None, **config) -> dict:
        from jbschema import CompilerConfig

        mapping = dict(views or {})
        mapping.setdefault("inline.json.jbuilder", source)
        compiler = TemplateCompiler(DictLoader(mapping), CompilerConfig(**config))
        result = compiler.compile_source(source, name="inline.json.jbuilder")
        return SchemaCompiler().compile(result.root).schema

    return _compile
