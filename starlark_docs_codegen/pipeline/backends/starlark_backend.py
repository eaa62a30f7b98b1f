"""
Starlark stub backend.

Generates a Python-syntax stub module documenting the Starlark
constructor functions of Go API types.
"""

from __future__ import annotations

from dataclasses import replace

from ...errors import UnsupportedShapeError
from ..analyzer import ParamSpec, arg_name, classify, is_time_member, require_spec_member_type
from ..config import CodeGeneratorConfig
from ..type_ast import FieldDescriptor, TypeDescriptor
from .base import ArgDoc, StubBackend

# Object metadata parameters shared by every top-level constructor
METADATA_PARAMS = [
    ParamSpec(name="name", annotation="str"),
    ParamSpec(name="labels", annotation="Dict[str, str]", default="None"),
    ParamSpec(name="annotations", annotation="Dict[str, str]", default="None"),
]

METADATA_ARG_DOCS = [
    ArgDoc(name="name", doc="The name in the Object metadata."),
    ArgDoc(name="labels", doc="A set of key/value pairs in the Object metadata for grouping objects."),
    ArgDoc(name="annotations", doc="A set of key/value pairs in the Object metadata for attaching data to objects."),
]

# Separates top-level declarations
DECLARATION_SEPARATOR = "\n\n\n"


class StarlarkBackend(StubBackend):
    """Starlark stub backend."""

    TEMPLATE_LANG = "starlark"
    FILE_EXTENSION = "py"

    def __init__(self, config: CodeGeneratorConfig):
        super().__init__(config)
        self.time_types = set(config.time_types)

    def generate(self, targets: list[TypeDescriptor], members: list[TypeDescriptor]) -> str:
        """Generate the stub module.

        Member classes come first, so every function below can name them.
        """
        blocks = [self.render_preamble()]
        blocks.extend(self.render_member_class(t) for t in members)
        blocks.extend(self.render_top_level_function(t) for t in targets)
        blocks.extend(self.render_member_function(t) for t in members)
        return DECLARATION_SEPARATOR.join(blocks) + "\n"

    def render_preamble(self) -> str:
        rendered = self.prefix_template.render(
            add_generation_comment=self.config.add_generation_comment,
            generator_name=self.config.generator_name,
        )
        return rendered.rstrip("\n")

    def render_top_level_function(self, target: TypeDescriptor) -> str:
        spec = require_spec_member_type(target)
        fields = self._included_fields(spec)
        field_params = self._field_params(target, fields)
        field_docs = self._field_arg_docs(fields)

        # A Spec field may not shadow a metadata parameter ("Name" -> "name_")
        reserved = {p.name for p in METADATA_PARAMS}
        for i, param in enumerate(field_params):
            if param.name in reserved:
                field_params[i] = replace(param, name=f"{param.name}_")
                field_docs[i] = replace(field_docs[i], name=f"{param.name}_")

        params = list(METADATA_PARAMS) + field_params
        arg_docs = list(METADATA_ARG_DOCS) + field_docs
        return self._render_function(target, params, arg_docs, return_type=None)

    def render_member_class(self, member: TypeDescriptor) -> str:
        rendered = self.class_template.render(
            name=member.name,
            doc_lines=self._doc_lines(member.comment_lines),
        )
        return rendered.rstrip("\n")

    def render_member_function(self, member: TypeDescriptor) -> str:
        fields = self._included_fields(member)
        params = self._field_params(member, fields)
        arg_docs = self._field_arg_docs(fields)
        return self._render_function(member, params, arg_docs, return_type=member.name)

    def _render_function(
        self,
        t: TypeDescriptor,
        params: list[ParamSpec],
        arg_docs: list[ArgDoc],
        return_type: str | None,
    ) -> str:
        rendered = self.function_template.render(
            type_name=t.name,
            params=params,
            return_type=return_type,
            doc_lines=self._doc_lines(t.comment_lines),
            arg_docs=arg_docs,
        )
        return rendered.rstrip("\n")

    def _included_fields(self, t: TypeDescriptor) -> list[FieldDescriptor]:
        """Fields that become parameters: everything but timestamps."""
        return [m for m in t.members if not is_time_member(m, self.time_types)]

    def _field_params(self, owner: TypeDescriptor, fields: list[FieldDescriptor]) -> list[ParamSpec]:
        params = []
        for field in fields:
            try:
                params.append(classify(field))
            except UnsupportedShapeError as e:
                raise e.with_owner(owner.name) from e
        return params

    def _field_arg_docs(self, fields: list[FieldDescriptor]) -> list[ArgDoc]:
        return [ArgDoc(name=arg_name(field), doc=self._field_doc(field.comment_lines)) for field in fields]
