from pathlib import Path

import pytest

from starlark_docs_codegen.pipeline.type_ast import FieldDescriptor, TypeDescriptor, TypeKind

PACKAGES_DIR = Path(__file__).parent / "test_data" / "packages"
REFERENCE_DIR = Path(__file__).parent / "test_data" / "reference"
TILT_PACKAGE = PACKAGES_DIR / "tilt" / "pkg" / "apis" / "core" / "v1alpha1"
EXTERNAL_PACKAGE = PACKAGES_DIR / "external" / "api"

META_V1 = "k8s.io/apimachinery/pkg/apis/meta/v1"


def builtin(name):
    return TypeDescriptor(kind=TypeKind.BUILTIN, name=name)


def struct(name, *members, comments=None, package="example.com/api"):
    return TypeDescriptor(
        kind=TypeKind.STRUCT,
        name=name,
        package=package,
        members=list(members),
        comment_lines=list(comments or []),
    )


def pointer(elem):
    return TypeDescriptor(kind=TypeKind.POINTER, name=f"*{elem.name}", elem=elem)


def slice_of(elem):
    return TypeDescriptor(kind=TypeKind.SLICE, name=f"[]{elem.name}", elem=elem)


def map_of(key, elem):
    return TypeDescriptor(kind=TypeKind.MAP, name=f"map[{key.name}]{elem.name}", key=key, elem=elem)


def alias(name, underlying):
    return TypeDescriptor(kind=TypeKind.ALIAS, name=name, package="example.com/api", underlying=underlying)


def field(name, t, comments=None):
    return FieldDescriptor(name=name, type=t, comment_lines=list(comments or []))


def meta_time(name="Time"):
    return TypeDescriptor(kind=TypeKind.EXTERNAL, name=name, package=META_V1)


def named(package, name):
    """The named type declared in a loaded package, or None."""
    return next((t for t in package.types if t.name == name), None)


@pytest.fixture
def packages_dir():
    return PACKAGES_DIR


@pytest.fixture
def tilt_package():
    return TILT_PACKAGE
